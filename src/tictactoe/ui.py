"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import EMPTY
from .session import GameMode, GameSession

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
LAST_SEEN: Dict[str, float] = {}
SESSION_LOCK = threading.Lock()
app = FastAPI(
    title="Tic-Tac-Toe",
    description="Tic-tac-toe against a friend or a minimax computer opponent",
)

AI_THINK_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "1.0"))
SESSION_TTL_SECONDS: float = float(
    os.environ.get("TICTACTOE_SESSION_TTL", str(60 * 30))
)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(
        default=GameMode.HUMAN,
        description="'human' for two players, 'computer' to play the AI",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _cleanup_sessions() -> None:
    """Drop sessions nobody has touched for ``SESSION_TTL_SECONDS``."""

    now = time.time()
    expired = [
        game_id
        for game_id, seen in list(LAST_SEEN.items())
        if now - seen >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        LAST_SEEN.pop(game_id, None)
        session = SESSIONS.pop(game_id, None)
        if session is not None:
            session.close()
            logger.info("Expired game %s", game_id)


def _create_session(mode: GameMode) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(mode=mode, ai_delay=AI_THINK_DELAY)
    session_id = uuid.uuid4().hex
    with SESSION_LOCK:
        _cleanup_sessions()
        SESSIONS[session_id] = session
        LAST_SEEN[session_id] = time.time()
    logger.info("Created game %s (%s)", session_id, mode.value)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    with SESSION_LOCK:
        _cleanup_sessions()
        try:
            session = SESSIONS[game_id]
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Game not found") from exc
        LAST_SEEN[game_id] = time.time()
        return session


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        winner = session.winner
        move_log = session.move_log
        state: Dict[str, object] = {
            "id": game_id,
            "board": ["" if c == EMPTY else c for c in session.board],
            "status": session.status,
            "gameOver": session.game_over,
            "mode": session.mode.value,
            "modeLabel": session.mode_label,
            "toggleLabel": session.toggle_label,
            "currentPlayer": session.current_label,
            "currentMark": session.turn.value,
            "winner": winner.value if winner else None,
            "drawn": session.drawn,
            "aiPending": session.ai_pending,
            "moveLog": move_log,
        }
        if move_log:
            state["lastMove"] = dict(move_log[-1])
        return state


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    # Rejected moves leave the game as it was; the client re-renders the state.
    if not session.apply_move(request.cell_index):
        logger.debug("Ignored move %d on game %s", request.cell_index, game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/new")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.new_game()
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/mode")
def toggle_mode(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.toggle_mode()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 0.5rem;
        letter-spacing: 0.06em;
      }
      .display {
        font-size: 1.25rem;
        font-weight: 600;
        margin: 1rem 0;
        min-height: 1.5em;
      }
      .mode {
        color: rgba(19, 32, 58, 0.7);
        margin: 0;
      }
      .grid {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        margin: 0 auto 1.5rem;
        width: min(300px, 100%);
      }
      .grid.thinking {
        opacity: 0.7;
      }
      .grid-item {
        aspect-ratio: 1;
        border-radius: 12px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        font-size: 2.5rem;
        font-weight: 700;
        cursor: pointer;
      }
      .grid-item.x {
        color: #2f5bff;
      }
      .grid-item.o {
        color: #ff5b6b;
      }
      .controls {
        display: flex;
        gap: 0.75rem;
        justify-content: center;
      }
      button.action {
        font-size: 1rem;
        padding: 0.55rem 0.95rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: rgba(226, 232, 255, 0.9);
        cursor: pointer;
        font-family: inherit;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <p class=\"mode\" id=\"mode-label\"></p>
      <div class=\"display\" id=\"display\">Loading…</div>
      <div class=\"grid\" id=\"grid\"></div>
      <div class=\"controls\">
        <button class=\"action\" id=\"new-game-button\">New Game</button>
        <button class=\"action\" id=\"toggle-button\">Vs Computer</button>
      </div>
    </main>
    <script>
      const gridEl = document.getElementById('grid');
      const displayEl = document.getElementById('display');
      const modeLabelEl = document.getElementById('mode-label');
      const newGameButton = document.getElementById('new-game-button');
      const toggleButton = document.getElementById('toggle-button');

      let gameId = null;
      let gameState = null;
      let pollHandle = null;
      let isRequestPending = false;

      const cells = Array.from({ length: 9 }, (_, index) => {
        const cell = document.createElement('button');
        cell.classList.add('grid-item');
        cell.setAttribute('aria-label', `Cell ${index + 1}`);
        cell.addEventListener('click', () => sendMove(index));
        gridEl.appendChild(cell);
        return cell;
      });

      function render() {
        if (!gameState) return;
        gameState.board.forEach((mark, index) => {
          const cell = cells[index];
          cell.textContent = mark;
          cell.classList.toggle('x', mark === 'X');
          cell.classList.toggle('o', mark === 'O');
        });
        displayEl.textContent = gameState.status;
        modeLabelEl.textContent = gameState.modeLabel;
        toggleButton.textContent = gameState.toggleLabel;
        gridEl.classList.toggle('thinking', Boolean(gameState.aiPending));
      }

      function stopPolling() {
        if (pollHandle !== null) {
          clearTimeout(pollHandle);
          pollHandle = null;
        }
      }

      function ensurePolling() {
        if (pollHandle !== null) return;
        pollHandle = window.setTimeout(pollState, 300);
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        render();
        if (gameState.aiPending && !gameState.gameOver) {
          ensurePolling();
        } else {
          stopPolling();
        }
      }

      async function request(url, body) {
        const options = { method: 'POST' };
        if (body !== undefined) {
          options.headers = { 'Content-Type': 'application/json' };
          options.body = JSON.stringify(body);
        }
        const response = await fetch(url, options);
        if (!response.ok) {
          throw new Error('Request failed');
        }
        return response.json();
      }

      async function run(action) {
        if (isRequestPending) return;
        isRequestPending = true;
        try {
          setState(await action());
        } catch (error) {
          displayEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function pollState() {
        pollHandle = null;
        if (!gameId) return;
        try {
          const response = await fetch(`/api/game/${gameId}`);
          if (response.ok) {
            setState(await response.json());
            return;
          }
        } catch (error) {
          console.error('Polling failed', error);
        }
        ensurePolling();
      }

      function sendMove(cellIndex) {
        if (!gameState || gameState.gameOver || gameState.aiPending) return;
        if (gameState.board[cellIndex] !== '') return;
        run(() => request(`/api/game/${gameId}/move`, { cellIndex }));
      }

      newGameButton.addEventListener('click', () => {
        stopPolling();
        run(() => request(`/api/game/${gameId}/new`));
      });
      toggleButton.addEventListener('click', () => {
        stopPolling();
        run(() => request(`/api/game/${gameId}/mode`));
      });

      run(() => request('/api/game', { mode: 'human' }));
    </script>
  </body>
</html>
"""
