import copy
import json
from pathlib import Path

DEFAULT_CONFIG_PATH = Path('data') / 'sorter_config.json'

DEFAULT_CONFIG = {
    "roles": [
        {"name": "Finance", "cap": 10},
        {"name": "Space", "cap": 5},
        {"name": "Media", "cap": 5},
    ],
    "over_role": "Finance",
    "pods": ["Pod 1", "Pod 2", "Pod 3", "Pod 4", "Pod 5"],
    "signals": {
        "Finance": [
            {"field": "trait", "match": "equals", "value": "Analytical", "weight": 1.0},
            {"field": "preference", "match": "equals", "value": "Finance", "weight": 1.0},
            {"field": "tags", "match": "contains", "value": "financ|econ|account|business|math", "weight": 0.5},
            {"field": "aspiration", "match": "contains", "value": "bank|invest|consult|analyst|founder", "weight": 0.5},
        ],
        "Space": [
            {"field": "trait", "match": "equals", "value": "Organizer", "weight": 1.0},
            {"field": "preference", "match": "equals", "value": "Space", "weight": 1.0},
            {"field": "tags", "match": "contains", "value": "architect|design|engineer|event|hospitality", "weight": 0.5},
            {"field": "aspiration", "match": "contains", "value": "event|operations|manage|planner|build", "weight": 0.5},
        ],
        "Media": [
            {"field": "trait", "match": "equals", "value": "Creative", "weight": 1.0},
            {"field": "preference", "match": "equals", "value": "Media", "weight": 1.0},
            {"field": "tags", "match": "contains", "value": "media|film|photo|journal|market|comm|art", "weight": 0.5},
            {"field": "aspiration", "match": "contains", "value": "creator|journalis|market|brand|director|writer", "weight": 0.5},
        ],
    },
    "email_domain_pattern": r"^[^@\s]+@([a-z0-9-]+\.)*example\.edu$",
    "allow_list": [],
    "source": {
        "sheet_id": "",
        "sheet_name": "Form Responses 1",
    },
}


def load_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data, path):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=4, ensure_ascii=False)


def load_config(path=None):
    """
    Loads the sorter configuration.

    Missing keys fall back to DEFAULT_CONFIG, so a config file only needs to
    carry what it overrides. If no file exists the defaults are returned.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path.exists():
        loaded = load_json(config_path)
        for key, value in loaded.items():
            config[key] = value

    validate_config(config)
    return config


def role_names(config):
    return [r['name'] for r in config['roles']]


def role_caps(config):
    return {r['name']: int(r.get('cap', 0)) for r in config['roles']}


def anchor_roles(config):
    return [name for name in role_names(config) if name != config['over_role']]


def validate_config(config):
    names = role_names(config)
    if not names:
        raise ValueError("At least one role is required")
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate role names: {names}")

    for role in config['roles']:
        if int(role.get('cap', 0)) < 0:
            raise ValueError(f"Negative cap for role {role['name']}")

    if config.get('over_role') not in names:
        raise ValueError(f"over_role {config.get('over_role')!r} is not one of {names}")

    pods = config.get('pods', [])
    if len(set(pods)) != len(pods):
        raise ValueError(f"Duplicate pod names: {pods}")

    for role in config.get('signals', {}):
        if role not in names:
            raise ValueError(f"Signals defined for unknown role {role!r}")
