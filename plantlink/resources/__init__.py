from plantlink.resources.api_config import load_api_config

__all__ = ["load_api_config"]
