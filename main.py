# uvicorn main:app --reload
from ejes.main import create_app

app = create_app()
