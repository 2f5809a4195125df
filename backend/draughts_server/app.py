from __future__ import annotations

from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from draughts.config import RuleOptions

from .schemas import ConfigRequest, MoveRequest, ResetRequest
from .session import GameSession


def create_app(options: Optional[RuleOptions] = None) -> FastAPI:
    app = FastAPI(title="English Draughts Rules Engine", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    session = GameSession(options)

    def get_session() -> GameSession:
        return session

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/board")
    def read_board(session: GameSession = Depends(get_session)):
        return session.serialize()

    @app.get("/valid-moves")
    def read_valid_moves(
        col: int = Query(...),
        row: int = Query(...),
        session: GameSession = Depends(get_session),
    ):
        try:
            return session.get_valid_moves(col, row)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/forced-captures")
    def read_forced_captures(session: GameSession = Depends(get_session)):
        return session.get_forced_captures()

    @app.post("/move")
    def play_move(payload: MoveRequest, session: GameSession = Depends(get_session)):
        try:
            return session.make_move(payload)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.post("/reset")
    def reset_game(payload: Optional[ResetRequest] = None, session: GameSession = Depends(get_session)):
        return session.reset(payload)

    @app.post("/config")
    def configure_rules(payload: ConfigRequest, session: GameSession = Depends(get_session)):
        return session.configure_rules(payload)

    return app


app = create_app()
