"""
Load a data folder and a battle config, and report the parsed annotations.

Usage:
    python verify_data.py [data_dir] [config_file]

Defaults to ./data and ./data/battle.json. Exits with 1 when the config
or any record annotation is invalid.
"""

import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from battle_mechanics.battle.calculator import BattleCalculator
from battle_mechanics.components.records import RecordKind
from battle_mechanics.core.config import load_config
from battle_mechanics.core.errors import ConfigurationError
from battle_mechanics.resources.annotations import EMPTY_ANNOTATIONS
from battle_mechanics.resources.database import GameDatabase
from battle_mechanics.resources.stats import stat_list_to_string


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")

    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data")
    config_file = Path(sys.argv[2]) if len(sys.argv) > 2 else data_dir / "battle.json"

    try:
        config = load_config(config_file)

        logger.info("Loading database...")
        db = GameDatabase(data_dir)
        db.load_all()

        calculator = BattleCalculator(config, annotations=db.annotations)
    except ConfigurationError as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

    for kind in RecordKind:
        for record in db.records[kind].values():
            annotations = calculator.annotations.get(record)
            if annotations == EMPTY_ANNOTATIONS:
                continue
            parts = []
            if annotations.power_stats:
                parts.append(f"power stats: {stat_list_to_string(annotations.power_stats)}")
            if annotations.resist_stats:
                parts.append(f"resist stats: {stat_list_to_string(annotations.resist_stats)}")
            if annotations.hit_mod:
                parts.append(f"hit mod: {annotations.hit_mod:+g}%")
            if annotations.crit_mod:
                parts.append(f"crit mod: {annotations.crit_mod:+g}%")
            if annotations.crit_boost:
                parts.append(f"crit boost: {annotations.crit_boost:+g}%")
            print(f"{kind.value} {record.id} ({record.name}): {'; '.join(parts)}")

    logger.info(f"VERIFICATION SUCCESSFUL: {len(calculator.annotations)} records parsed.")


if __name__ == "__main__":
    main()
