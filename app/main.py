from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy import text

from app.core.checkins.api.v1.routes_checkins import router as checkins_router
from app.core.gamification.api.v1.routes_gamification import (
    router as gamification_router,
)
from app.core.habits.api.v1.routes_habits import router as habits_router
from app.core.notifications.api.v1.routes_notifications import (
    router as notifications_router,
)
from app.core.users.api.v1.routes_users import router as users_router
from app.database.session import SessionLocal
from app.response import StandardResponse, make_error_response
from app.response.response import APIError
from app.utils.redis_client import get_redis


app = FastAPI()


@app.exception_handler(APIError)
async def api_error_handler(
    request: Request,
    exc: APIError,
) -> JSONResponse:
    response: StandardResponse = make_error_response(
        code=exc.code,
        http_code=exc.http_code,
        message=exc.message,
        details=exc.details,
        fields=exc.fields,
    )
    return JSONResponse(
        status_code=exc.http_code,
        content=jsonable_encoder(response),
    )


app.title = "Aadat API"
app.version = "1.0.0"


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
    finally:
        db.close()


def _redis_ok() -> bool:
    try:
        get_redis().ping()
        return True
    except Exception:
        return False


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def root() -> str:
    def row(label: str, ok: bool) -> str:
        color = "#10B981" if ok else "#EF4444"
        text = "Online" if ok else "Offline"
        return f"""
                <div class="info-row">
                    <span>{label}</span>
                    <span style="color:{color}; font-weight:600;">{text}</span>
                </div>
        """

    status_rows = (
        row("API:", True)
        + row("Database:", _database_ok())
        + row("Redis:", _redis_ok())
    )

    html = """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8" />
        <title>Aadat API - Status</title>
        <style>
            body {
                font-family: Inter, system-ui, sans-serif;
                background: #0F0F13;
                color: #E5E5E5;
                min-height: 100vh;
                display: flex;
                align-items: center;
                justify-content: center;
                margin: 0;
            }

            .container {
                text-align: center;
                background: #18181B;
                padding: 40px;
                border-radius: 16px;
                border: 1px solid rgba(255, 255, 255, 0.08);
                width: 100%;
                max-width: 480px;
            }

            .info-row {
                display: flex;
                justify-content: space-between;
                margin-bottom: 8px;
                font-size: 14px;
            }

            a.btn {
                padding: 10px 20px;
                border-radius: 10px;
                text-decoration: none;
                font-size: 14px;
                color: #E5E5E5;
                border: 1px solid rgba(255, 255, 255, 0.08);
            }
        </style>
    </head>
    <body>
        <div class="container">
            <h1>Aadat Backend</h1>
            <p>Habit tracking, streaks and achievements.</p>
            <div>
__STATUS_ROWS__
            </div>
            <p>
                <a class="btn" href="/docs">Swagger UI</a>
                <a class="btn" href="/redoc">ReDoc</a>
            </p>
        </div>
    </body>
    </html>
    """
    return html.replace("__STATUS_ROWS__", status_rows)


app.include_router(users_router, prefix="/api/v1")
app.include_router(habits_router, prefix="/api/v1")
app.include_router(checkins_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(gamification_router, prefix="/api/v1")


__all__ = ["app"]
