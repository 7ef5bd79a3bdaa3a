# utils/config.py
import logging
import os

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV = "VIRT_BRIDGE_CONFIG"
DEFAULT_CONFIG_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'config.yaml'))


def config_path(path=None):
    """显式参数 > 环境变量 VIRT_BRIDGE_CONFIG > 项目根目录 config.yaml"""
    return path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH


def load_config(path=None):
    """
    读取 YAML 配置。文件不存在或解析失败时返回空字典。
    """
    path = config_path(path)

    if not os.path.exists(path):
        logger.warning("Config file not found: %s", path)
        return {}

    with open(path, 'r', encoding='utf-8') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("YAML parse error in %s: %s", path, e)
            return {}

    if not isinstance(config, dict):
        logger.warning("Config %s is not a mapping, ignoring", path)
        return {}
    return config
