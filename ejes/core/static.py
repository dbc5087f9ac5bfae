from pathlib import Path

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.staticfiles import StaticFiles


class SPAStaticFiles(StaticFiles):
    """
    Fichiers statiques du client ; toute route inconnue renvoie index.html.
    """

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def serve_static(app: FastAPI, directory: str) -> None:
    dist_path = Path(directory).resolve()
    if not dist_path.is_dir():
        raise RuntimeError(
            f"Could not find the build directory: {dist_path}, make sure to build the client first"
        )
    # monté en dernier : les routes /api restent prioritaires
    app.mount("/", SPAStaticFiles(directory=str(dist_path), html=True), name="client")
