import streamlit as st
import numpy as np
import pandas as pd

from cosmos2048.client import ApiClient, ApiError
from cosmos2048.config import Settings
from cosmos2048.game import Direction, Game, MoveResult
from cosmos2048.rewards import select_prize
from cosmos2048.tokens import EMPTY_COLOR, TOKENS, tile_data, tile_rarity


@st.cache_resource
def get_settings() -> Settings:
    return Settings.from_env()


def new_game():
    st.session_state.game = Game()
    st.session_state.last = None
    st.session_state.prize = None
    st.session_state.minted = None
    st.session_state.submitted = False


def display_board(board, last: MoveResult | None):
    """
    Render the board as token tiles. Cells merged by the last move get a
    highlighted border.
    """
    board = np.array(board)

    merged = set()
    if last is not None:
        merged = {(m.row, m.col) for m in last.merges}

    st.markdown("""
    <style>
    .tile-container {
        background-color: #1F2937;
        border-radius: 12px;
        padding: 10px;
        width: fit-content;
    }
    .tile {
        width: 88px;
        height: 88px;
        margin: 4px;
        border-radius: 10px;
        display: flex;
        flex-direction: column;
        justify-content: center;
        align-items: center;
        font-family: 'Arial', sans-serif;
        font-weight: bold;
        color: white;
        text-align: center;
    }
    .tile .emoji { font-size: 28px; }
    .tile .name { font-size: 12px; letter-spacing: 1px; }
    .tile .value { font-size: 10px; opacity: 0.8; }
    .merged { box-shadow: 0 0 0 3px #FDE68A; }
    .special { box-shadow: 0 0 16px 4px #C084FC; }
    </style>
    """, unsafe_allow_html=True)

    s = """<div class="tile-container">"""
    for i in range(4):
        s += '<div style="display: flex;">'
        for j in range(4):
            value = int(board[i][j])
            if value == 0:
                s += f'<div class="tile" style="background-color: {EMPTY_COLOR};"></div>'
                continue
            token = tile_data(value)
            classes = "tile"
            if (i, j) in merged:
                classes += " merged"
            if token.special:
                classes += " special"
            s += (
                f'<div class="{classes}" style="background-color: {token.color};">'
                f'<div class="emoji">{token.emoji}</div>'
                f'<div class="name">{token.name}</div>'
                f'<div class="value">{value}</div>'
                "</div>"
            )
        s += "</div>"
    s += "</div>"

    st.markdown(s, unsafe_allow_html=True)


def hud(game: Game):
    board = np.array(game.state)
    if game.score > st.session_state.best:
        st.session_state.best = game.score

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Score", game.score)
    with col2:
        st.metric("Best", st.session_state.best)
    with col3:
        st.metric("Highest Tile", int(np.max(board)))
    with col4:
        st.metric("Moves made", game.moves)

    if game.over:
        st.error("Game Over! No more moves available.")
    elif game.won:
        st.success("You reached 2048! You won! Keep going for INFINITY.")


def controls(game: Game):
    cols = st.columns(4)
    labels = [
        (Direction.UP, "⬆️ Up"),
        (Direction.LEFT, "⬅️ Left"),
        (Direction.DOWN, "⬇️ Down"),
        (Direction.RIGHT, "➡️ Right"),
    ]
    for col, (direction, label) in zip(cols, labels):
        with col:
            if st.button(label, disabled=game.over, use_container_width=True):
                st.session_state.last = game.move(direction)
                st.rerun()


def account(client: ApiClient, game: Game):
    st.subheader("Account")
    if client.address:
        st.info(f"Playing as: {client.address}")
    else:
        if st.button("Login Guest"):
            try:
                client.login_guest()
                st.rerun()
            except ApiError as e:
                st.error(f"Login failed: {e.message}")
        address = st.text_input("Wallet address")
        if st.button("Connect wallet") and address:
            try:
                client.login_wallet(address)
                st.rerun()
            except ApiError as e:
                st.error(f"Login failed: {e.message}")

    can_submit = client.address and game.score > 0 and not st.session_state.submitted
    if can_submit and st.button("Submit Score"):
        try:
            client.submit_score(game.score, run_id=str(id(game)))
            st.session_state.submitted = True
            st.success("Score submitted successfully! 🎉")
        except ApiError as e:
            st.error(f"Failed to submit score: {e.message}")


def wheel(client: ApiClient, game: Game):
    st.subheader("🎰 Wheel of Fortune")
    rarity = tile_rarity(game.max_tile)
    st.write(f"Max tile {game.max_tile}: **{rarity}** run")

    if st.session_state.prize is None:
        if st.button("Spin the wheel"):
            st.session_state.prize = select_prize()
            prize = st.session_state.prize
            if client.address and prize.rarity != "none":
                try:
                    st.session_state.minted = client.mint_badge(
                        prize=prize.id, score=game.score, max_tile=game.max_tile
                    )
                except ApiError as e:
                    st.error(f"Minting failed: {e.message}")
            st.rerun()
        return

    prize = st.session_state.prize
    st.markdown(f"## {prize.emoji} {prize.name}")
    minted = st.session_state.minted
    if minted:
        st.success(f"Badge minted: {minted['tokenId']} (tx {minted['txHash']})")
    elif prize.rarity != "none" and not client.address:
        st.caption("Log in to mint your badge.")


def leaderboard(client: ApiClient):
    st.subheader("🏆 Leaderboard")
    try:
        entries = client.leaderboard(limit=10)
    except ApiError as e:
        st.warning(f"Leaderboard unavailable: {e.message}")
        return
    if not entries:
        st.caption("No scores yet. Be the first!")
        return
    df = pd.DataFrame(entries)[["rank", "address", "bestScore", "at"]]
    df["at"] = pd.to_datetime(df["at"]).dt.strftime("%Y-%m-%d %H:%M")
    st.dataframe(df, hide_index=True, use_container_width=True)


def badges(client: ApiClient):
    if not client.address:
        return
    st.subheader("🏅 Your badges")
    try:
        owned = client.badges(client.address)
    except ApiError as e:
        st.warning(f"Failed to fetch your badges: {e.message}")
        return
    if not owned:
        st.caption("Play Cosmos 2048 and spin the wheel to earn badges.")
    for badge in owned:
        props = badge["metadata"]["properties"]
        st.write(f"{badge['tokenId']}: {props['rarity']}, score {props['game_score']}")


def legend():
    st.subheader("Token legend")
    df = pd.DataFrame(
        [
            {"Tile": value, "Token": f"{t.emoji} {t.name}", "About": t.description}
            for value, t in TOKENS.items()
        ]
    )
    st.dataframe(df, hide_index=True, use_container_width=True)


if __name__ == "__main__":
    st.title("🌌 Cosmos 2048")

    if "client" not in st.session_state:
        st.session_state.client = ApiClient(get_settings().api_url)
    if "best" not in st.session_state:
        st.session_state.best = 0
    if "game" not in st.session_state:
        new_game()

    game = st.session_state.game
    client = st.session_state.client

    if st.button("New Game"):
        new_game()
        st.rerun()

    hud(game)
    controls(game)
    display_board(game.state, st.session_state.last)
    st.caption("Reach 2048 to win the Cosmos!")

    st.markdown("---")
    left, right = st.columns(2)
    with left:
        account(client, game)
        if game.over or game.won:
            wheel(client, game)
    with right:
        leaderboard(client)
        badges(client)
    legend()
