"""Pattern Police MCPサーバーのコマンドラインエントリポイント。"""

if __name__ == "__main__":
    import logging
    import sys

    import uvicorn
    from starlette.middleware import Middleware

    from pattern_police.config import ServerConfig
    from pattern_police.middleware import TokenAuthMiddleware
    from pattern_police.server import create_server

    config = ServerConfig()
    # stdioトランスポートではstdoutをプロトコルが使うためログはstderrへ
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    mcp = create_server(config)
    if config.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        app = mcp.http_app(
            transport="streamable-http",
            middleware=[Middleware(TokenAuthMiddleware, url_token=config.url_token)],
        )
        uvicorn.run(app, host=config.host, port=config.port)
