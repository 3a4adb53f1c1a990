from configparser import ConfigParser
import logging
import os

CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.ini")
ENV_PREFIX = "BATAM_"


def initialize_config(config_file=None):
    """ Parse the property files and env variables to find broker config params

    The packaged config.ini holds the defaults. If *config_file* is given it
    is read afterwards, so its values replace the defaults. Finally every
    key can be overridden by a BATAM_<KEY> environment variable.
    If at least one of the config parameters is not found a KeyError exception
    is thrown. If a parameter could not be parsed, a ValueError is thrown.
    """
    config = ConfigParser()
    config.read(CONFIG_FILE)
    if config_file is not None:
        if not config.read(config_file):
            logging.getLogger("batam.config").warning(f"Config file {config_file} not found, using defaults")

    config_params = {}
    try:
        config_params["logging_level"] = os.getenv(f"{ENV_PREFIX}LOGGING_LEVEL", config["DEFAULT"]["LOGGING_LEVEL"])

        config_params["host"] = os.getenv(f"{ENV_PREFIX}HOST", config["RABBITMQ"]["HOST"])
        config_params["username"] = os.getenv(f"{ENV_PREFIX}USERNAME", config["RABBITMQ"]["USERNAME"])
        config_params["password"] = os.getenv(f"{ENV_PREFIX}PASSWORD", config["RABBITMQ"]["PASSWORD"])
        config_params["port"] = int(os.getenv(f"{ENV_PREFIX}PORT", config["RABBITMQ"]["PORT"]))
        config_params["vhost"] = os.getenv(f"{ENV_PREFIX}VHOST", config["RABBITMQ"]["VHOST"])
        config_params["queue"] = os.getenv(f"{ENV_PREFIX}QUEUE", config["RABBITMQ"]["QUEUE"])
        config_params["publisher"] = os.getenv(f"{ENV_PREFIX}PUBLISHER", config["RABBITMQ"].get("PUBLISHER", ""))

    except KeyError as e:
        raise KeyError(f"Required key was not found in {config_file or CONFIG_FILE} or Env Vars. Error: {e}. Aborting")
    except ValueError as e:
        raise ValueError(f"Key could not be parsed in {config_file or CONFIG_FILE} or Env Vars. Error: {e}. Aborting")

    return config_params
