import uvicorn

from .app import create_app
from .config import get_settings

app = create_app()

def run() -> None:
    sett = get_settings()
    uvicorn.run(app, host=sett.host, port=sett.port)

if __name__ == "__main__":
    run()
