import logging
import requests
from datetime import datetime, timezone

# Settings
from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()


class SlackErrorHandler(logging.Handler):
    """Sends ERROR and CRITICAL logs to Slack"""
    def __init__(self):
        super().__init__(level=logging.ERROR)
        self.webhook = configs.SLACK_WEBHOOK_URL
        self.environment = configs.APPLICATION_ENVIRONMENT.upper()
        self.enabled = bool(self.webhook)

    def emit(self, record):
        if not self.enabled:
            return
        try:
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
            lines = [
                f":mag: {self.environment} SentinelPH webhooks - please investigate.",
                "",
                f"- :clock1: Timestamp: {ts}",
                f"- :triangular_flag_on_post: Level: *{record.levelname}*",
                f"- :warning: Logger: {record.name}",
                f"- :file_folder: Module: {getattr(record, 'module', '')}",
                f"- :pushpin: Function: {getattr(record, 'funcName', '')}",
                f"- :straight_ruler: Line Number: {getattr(record, 'lineno', '')}",
                "",
                "```" + str(record.getMessage()) + "```",
            ]
            requests.post(self.webhook, json={"text": "\n".join(lines)}, timeout=2)
        except Exception:
            self.handleError(record)


# Export a singleton handler instance for reuse
slack_handler = SlackErrorHandler()
