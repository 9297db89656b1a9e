"""Development entry point: ``python app.py``.

Terminals should be pointed at ``http://<host>:<PORT>/iclock/``.
"""
import os

from src.adms_server.adms_server.main import create_app

app = create_app()


if __name__ == "__main__":
    # The reloader would start a second device monitor thread.
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), use_reloader=False, threaded=True)
