#!/usr/bin/env python3
"""Simple script to verify config.example.yaml structure without loading the app."""

import yaml
from pathlib import Path

SECTION_KEYS = {
    'search': {'page_size', 'max_results', 'sort', 'query_suffix', 'all_categories_label'},
    'http': {'base_url', 'request_timeout', 'user_agent'},
    'server': {'host', 'port', 'cors_origins'},
    'logging': {'level', 'format'},
}


def verify_config_structure(config_file=Path("config.example.yaml")):
    """Verify config.example.yaml has the expected structure."""
    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"✗ Failed to parse {config_file}: {e}")
        return False

    if not isinstance(config, dict):
        print(f"✗ {config_file} must contain a mapping at the top level")
        return False

    errors = []

    for key in config:
        if key not in SECTION_KEYS:
            errors.append(f"Unknown top-level key: {key}")

    for section, allowed in SECTION_KEYS.items():
        if section not in config:
            continue
        value = config[section]
        if not isinstance(value, dict):
            errors.append(f"'{section}' must be a dictionary")
            continue
        for key in value:
            if key not in allowed:
                errors.append(f"Unknown key in '{section}': {key}")

    search = config.get('search') or {}
    if isinstance(search, dict):
        if 'page_size' in search and not 1 <= int(search['page_size']) <= 5:
            errors.append("search.page_size must be between 1 and 5")
        if 'max_results' in search and not 1 <= int(search['max_results']) <= 10:
            errors.append("search.max_results must be between 1 and 10")
        if 'sort' in search and search['sort'] not in ('comment', 'random'):
            errors.append(f"search.sort has invalid value: {search['sort']}")

    server = config.get('server') or {}
    if isinstance(server, dict) and 'cors_origins' in server:
        if not isinstance(server['cors_origins'], list):
            errors.append("server.cors_origins must be a list")

    logging_section = config.get('logging') or {}
    if isinstance(logging_section, dict) and 'format' in logging_section:
        if logging_section['format'] not in ('json', 'key-value'):
            errors.append(f"logging.format has invalid value: {logging_section['format']}")

    if errors:
        print(f"✗ {config_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"✓ {config_file} structure is valid")
    print(f"  - Sections: {', '.join(config) or 'none (all defaults)'}")
    print(f"  - Max results per search: {search.get('max_results', 10)}")
    print(f"  - Listen port: {server.get('port', 3001)}")
    print(f"  - Log format: {logging_section.get('format', 'key-value')}")
    return True


if __name__ == "__main__":
    import sys
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    success = verify_config_structure(path)
    sys.exit(0 if success else 1)
