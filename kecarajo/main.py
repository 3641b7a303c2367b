import logging

import uvicorn
from kecarajo.api.api_run import app
from kecarajo.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL
from kecarajo.utilities.network import server_urls


def run():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    urls = server_urls(APP_HOST, APP_PORT)
    print(f"Uvicorn running on {urls[0]} (Press CTRL+C to quit)")
    if len(urls) > 1:
        print(f"Accessible from other devices at: {urls[1]}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
