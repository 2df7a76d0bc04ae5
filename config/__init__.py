import os
import json
from pathlib import Path
from dotenv import load_dotenv
from .logging_config import setup_app_logging
import logging

# Load environment variables from .env file
load_dotenv()

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

PROJECT_ROOT = CONFIG_DIR.parent

# Load configuration from config.json
config_path = CONFIG_DIR / 'config.json'
with open(config_path, 'r', encoding='utf-8') as f:
    CONFIG = json.load(f)

# CONFIG is the in-memory, runtime representation of config.json plus derived values.
CONFIG['project_root'] = str(PROJECT_ROOT)

if 'paths' not in CONFIG:
    CONFIG['paths'] = {}

# Table files are looked up next to this module unless config.json points elsewhere.
intent_rules_name = CONFIG.get('paths', {}).get('intent_rules_file', 'intent_rules.json')
topic_sources_name = CONFIG.get('paths', {}).get('topic_sources_file', 'topic_sources.json')

CONFIG['paths']['intent_rules_full_path'] = str(CONFIG_DIR / intent_rules_name)
CONFIG['paths']['topic_sources_full_path'] = str(CONFIG_DIR / topic_sources_name)

# --- Prompt Loading ---

classification_prompt_path = CONFIG_DIR / 'classification_system_prompt.txt'
try:
    with open(classification_prompt_path, 'r', encoding='utf-8') as f:
        CONFIG['classification_message'] = f.read().strip()
except FileNotFoundError:
    raise FileNotFoundError(
        f"Classification system prompt file not found: {classification_prompt_path}\n"
        f"Please ensure classification_system_prompt.txt exists in the config directory."
    )

context_template_path = CONFIG_DIR / 'context_prompt_template.txt'
try:
    with open(context_template_path, 'r', encoding='utf-8') as f:
        # Leading/trailing newlines are part of the rendered prompt, so the file is kept verbatim.
        CONFIG['context_prompt_template'] = f.read()
except FileNotFoundError:
    raise FileNotFoundError(
        f"Context prompt template file not found: {context_template_path}\n"
        f"Please ensure context_prompt_template.txt exists in the config directory."
    )

def validate_config():
    """Validate that the configuration sections required at runtime are present.

    API keys are deliberately not checked here: a missing key only disables the
    LLM classifier (which degrades to an empty result) and is reported by the
    provider layer when a client is first built.
    """
    required_services = ['llm']
    for service in required_services:
        if service not in CONFIG:
            raise ValueError(f"Missing configuration for service: {service}")

    required_models = ['classification', 'completion']
    for model in required_models:
        if model not in CONFIG['llm'].get('models', {}):
            raise ValueError(f"Missing configuration for LLM model: {model}")

# Validate configuration on module import
validate_config()

def get_config_value(json_keys: list, env_var_name: str, default_value=None):
    """
    Retrieves a configuration value.
    Priority:
    1. Environment variable (if env_var_name is provided and variable is set).
    2. Value from CONFIG dictionary (using json_keys).
    3. default_value.
    """
    if env_var_name:
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            # Attempt to match type of default_value if it's bool, int or float
            if isinstance(default_value, bool):
                if env_value.lower() == 'true': return True
                if env_value.lower() == 'false': return False
            elif isinstance(default_value, int):
                try:
                    return int(env_value)
                except ValueError:
                    pass # Fall through to JSON or default if not a valid int
            elif isinstance(default_value, float):
                try:
                    return float(env_value)
                except ValueError:
                    pass
            else:
                return env_value

    current_level = CONFIG
    try:
        for key in json_keys:
            current_level = current_level[key]
        if isinstance(current_level, (str, int, bool, float, list, dict)):
            return current_level
    except (KeyError, TypeError):
        pass # Key not found or CONFIG structure not as expected, fall through to default

    return default_value

# --- Timeouts ---
# Every call that waits on an external service is bounded by one of these.
CONFIG['llm']['timeout_s'] = get_config_value(['llm', 'timeout_s'], 'LLM_TIMEOUT_S', 10.0)
CONFIG.setdefault('connectors', {})
CONFIG['connectors']['timeout_s'] = get_config_value(['connectors', 'timeout_s'], 'CONNECTOR_TIMEOUT_S', 5.0)

# --- Feature flags ---
CONFIG.setdefault('features', {})
CONFIG['features']['llm_completion_enabled'] = get_config_value(
    ['features', 'llm_completion_enabled'], 'LLM_COMPLETION_ENABLED', False
)

# --- Logging Configuration ---
# Environment variables take precedence over config.json.
CONFIG['logging'] = {
    'level': get_config_value(['logging', 'level'], 'LOG_LEVEL', 'INFO'),
    'file_path': get_config_value(['logging', 'file_path'], 'LOG_FILE_PATH', ''),
    'max_bytes': get_config_value(['logging', 'max_bytes'], 'LOG_MAX_BYTES', 5*1024*1024), # 5MB
    'backup_count': get_config_value(['logging', 'backup_count'], 'LOG_BACKUP_COUNT', 3),
    'format': get_config_value(
        ['logging', 'format'],
        'LOG_FORMAT',
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
    ),
    'date_format': get_config_value(
        ['logging', 'date_format'],
        'LOG_DATE_FORMAT',
        '%Y-%m-%d %H:%M:%S'
    )
}

setup_app_logging(config=CONFIG.get('logging'))

config_init_logger = logging.getLogger(__name__)
config_init_logger.info("[config_init] Logging initialized from config/__init__.py using setup_app_logging.")
