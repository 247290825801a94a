"""
Gestionnaires d'exceptions.
- FunctionError: renvoie tel quel le corps JSON propre à chaque fonction.
- HTTPException standard: corps FastAPI {"detail": ...}.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.utils.errors import FunctionError

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def function_error_body(request: Request, exc: HTTPException):
        headers = getattr(exc, "headers", None)
        if isinstance(exc, FunctionError):
            return JSONResponse(status_code=exc.status_code, content=exc.payload, headers=headers)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)
