from __future__ import annotations

from pathlib import Path

from lotto_sim.io import load_run_config_from_json
from lotto_sim.main import run_lottery_simulation, write_outputs


def main() -> None:
    repo_root = Path(__file__).resolve().parent
    data_dir = repo_root / "data"
    output_dir = repo_root / "output"

    # data/run_config.json format: see lotto_sim.io.load_run_config_from_json
    config = load_run_config_from_json(data_dir / "run_config.json")

    result = run_lottery_simulation(config)

    write_outputs(result, output_dir)

    # Narration to stdout.
    print("\n".join(result.narration))


if __name__ == "__main__":
    main()
