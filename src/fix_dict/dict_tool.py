import logging
import os
import sys

import yaml

from .converter import convert_fix_xml
from .fix_protocol import FixProtocol, parse_message

# --- Global Configuration ---
CONFIG_FILE = "config/config.yaml"
DEFAULT_CONFIG = {
    'logging': {'file': 'logs/fix_dict.log', 'level': 'INFO'},
    'output': {'indent': 2},
}
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'
PACKAGE_LOGGER = 'src.fix_dict'

logger = logging.getLogger("FIX_DICT")


# --- Configuration ---
def load_config(path=CONFIG_FILE):
    """Read the YAML config, falling back to defaults section by section."""
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load config '{path}', using defaults: {e}")
        return config
    if not isinstance(loaded, dict):
        logger.warning(f"Config '{path}' is not a mapping, using defaults")
        return config

    for section, values in loaded.items():
        if isinstance(values, dict):
            config.setdefault(section, {}).update(values)
    return config


# --- Logging Setup ---
def setup_logging(log_file=None, level='INFO'):
    """Configure the tool logger and attach the same handlers to the library loggers."""
    level = getattr(logging, str(level).upper(), logging.INFO)

    for name in ("FIX_DICT", PACKAGE_LOGGER):
        log = logging.getLogger(name)
        log.setLevel(level)
        log.propagate = False
        if log.handlers:
            continue
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
        handlers = [logging.StreamHandler(sys.stderr)]
        if log_file:
            os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
            handlers.append(logging.FileHandler(log_file, mode='a'))
        for handler in handlers:
            handler.setFormatter(formatter)
            log.addHandler(handler)

    return logger


# --- Tool Actions ---
def read_dictionary_bytes(dict_path):
    # Raw bytes, so the XML encoding declaration decides the decoding.
    with open(dict_path, 'rb') as f:
        return f.read()


def run_convert(dict_path, out_path=None, indent=2):
    """Convert a dictionary file; return (json_text, error)."""
    result = convert_fix_xml(read_dictionary_bytes(dict_path))
    if not result.ok:
        return None, result.error

    for diag in result.diagnostics:
        logger.warning(f"{diag.kind}: {diag.message}")

    json_text = result.data.to_json(indent=indent)
    if out_path:
        os.makedirs(os.path.dirname(out_path) or '.', exist_ok=True)
        with open(out_path, 'w', encoding='utf-8') as f:
            f.write(json_text + '\n')
        logger.info(f"Wrote {result.data.version} dictionary to {out_path}")
    return json_text, None


def run_check(dict_path):
    """Convert a dictionary file and summarise it; return (lines, error)."""
    result = convert_fix_xml(read_dictionary_bytes(dict_path))
    if not result.ok:
        return [], result.error

    data = result.data
    lines = [
        f"Version: {data.version}",
        f"Fields: {len(data.fields)}",
        f"Messages: {len(data.messages)}",
        f"Header fields: {len(data.header)}",
        f"Trailer fields: {len(data.trailer)}",
    ]
    lines.extend(f"WARNING {d.kind}: {d.message}" for d in result.diagnostics)
    return lines, None


def run_validate_message(dict_path, raw_message):
    """Validate one delimited FIX message against a dictionary file; return (is_valid, reason)."""
    protocol = FixProtocol.from_file(dict_path)
    msg = parse_message(raw_message)
    if msg is None:
        return False, "Could not parse a complete FIX message"
    is_valid, reason = protocol.validate_message(msg)
    logger.info(f"{protocol}: {reason}")
    return is_valid, reason
