#!/usr/bin/env python3
"""Generate config.schema.json from the configuration model.

The schema lets editors validate ``~/.ras/config.yml`` files.

Usage:
    python scripts/generate_config_schema.py
"""

import json
from pathlib import Path

from access_setter.engine import AccessSetterConfig


def main() -> None:
    """Generate and save the config schema."""
    print("Generating access setter config schema...")

    schema = AccessSetterConfig.model_json_schema()
    schema["title"] = "Reversible access setter configuration"

    schema_path = Path(__file__).parent.parent / "config.schema.json"
    with open(schema_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2)
        f.write("\n")

    print(f"✓ Config schema: {schema_path}")
    print(f"  Properties: {', '.join(schema.get('properties', {}))}")
    print(f"  Size: {schema_path.stat().st_size:,} bytes")


if __name__ == "__main__":
    main()
