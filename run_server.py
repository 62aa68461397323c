"""
Start the server with uvicorn.

Usage:
    python run_server.py
"""

if __name__ == "__main__":
    import uvicorn

    from potato_server.settings import app_settings

    uvicorn.run(
        "potato_server:application",
        factory=True,
        host=app_settings.SERVER_HOST,
        port=app_settings.SERVER_PORT,
        ws_max_size=app_settings.WS_MAX_MESSAGE_SIZE,
    )
