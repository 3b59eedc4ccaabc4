import logging

from catalog_feeds.application import create_app
from catalog_feeds.config import CustomSettings, setup_logging


setup_logging()
settings = CustomSettings()
logging.getLogger().setLevel(settings.log_level)

app = create_app(settings)
