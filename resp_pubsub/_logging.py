import logging

logger = logging.getLogger("resp_pubsub")
