import uvicorn

from translation_desk.config import settings


def main():
    uvicorn.run("translation_desk.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
