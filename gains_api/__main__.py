import uvicorn

from gains_api.config import settings


def main() -> None:
    uvicorn.run("gains_api.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
