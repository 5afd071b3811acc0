import uvicorn

from src.main.web import app  # noqa: F401


if __name__ == "__main__":
    uvicorn.run("src.main.web:app", host="0.0.0.0", port=8000)
