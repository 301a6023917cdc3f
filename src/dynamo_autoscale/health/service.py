from __future__ import annotations

from dataclasses import dataclass

from dynamo_autoscale.commons.logging import LoggerHandle


@dataclass
class HealthService:
    log: LoggerHandle

    def payload(self) -> dict:
        self.log.debug("health check")
        return {
            "status": "ok",
            "logger": {
                "name": self.log.config.name,
                "level": self.log.level.label,
                "sink": self.log.sink,
            },
        }
