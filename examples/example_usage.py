"""Example: feed an ATTLOG batch through the service layer (no Flask).

Controllers are a thin layer; parsing, storage and aggregation live in services.
"""

import importlib

from config import get_settings_module

from src.adms_server.adms_server.container import build_container

SAMPLE_ATTLOG = "1001\t2024-03-05 08:58:12\t0\t1\t0\t0\n1001\t2024-03-05 17:04:40\t1\t1\t0\t0\n"


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, present_minutes=settings.MINUTES_FOR_PRESENT)
    result = container.ingestion_service.ingest("ATTLOG", SAMPLE_ATTLOG)
    print(result.to_dict())
    container.shutdown()


if __name__ == "__main__":
    main()
