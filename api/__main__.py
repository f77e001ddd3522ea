"""Run the server: python -m api"""

import logging
import os

import uvicorn

ENV_HOST = "MAFIA_HOST"
ENV_PORT = "MAFIA_PORT"


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    host = os.environ.get(ENV_HOST, "0.0.0.0")
    port = int(os.environ.get(ENV_PORT, "3000"))
    uvicorn.run("api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
