# uvicorn inland.main:app
from inland.server import create_app

app = create_app()
