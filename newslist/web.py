"""HTTP and websocket API serving news lists and contents."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Sequence

import redis
import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket

from . import mongo_store, redis_store
from .cors import CORSMiddleware
from .entities import ParamColumnRequest, ParamError, ParamStockNews, ResponseData
from .hub import Client, Hub

log = logging.getLogger(__name__)

STATIC_DIR = Path("static")
IMPORTANT_NEWS_LIMIT = 30
DEFAULT_MONGO_URL = "mongodb://localhost:27017"


def _ok(data: Any) -> JSONResponse:
    return JSONResponse(ResponseData(err_code=0, err_msg="", data=data).to_dict())


def _encode_response(data: Any) -> str:
    return json.dumps(ResponseData(data=data).to_dict(), ensure_ascii=False)


def create_app(service: Any, hub: Hub) -> Starlette:
    """Build the application answering list, content and push requests."""

    async def serve_home(request: Request) -> Response:
        page = STATIC_DIR / "index.html"
        if not page.is_file():
            return PlainTextResponse("Not found", status_code=404)
        return HTMLResponse(page.read_text(encoding="utf-8"))

    async def stock_info(request: Request) -> Response:
        try:
            params = ParamStockNews.from_query(request.query_params)
        except ParamError as exc:
            log.warning("GetStockInfoHandler: get params err: %s", exc)
            return Response(status_code=200)
        try:
            infos = service.stock_info(params)
        except (redis.RedisError, ValueError) as exc:
            log.error("GetSimpleInfoHandler err: %s", exc)
            return Response(status_code=200)
        return _ok(infos)

    async def important_news(request: Request) -> Response:
        return _ok(service.important_news_info(IMPORTANT_NEWS_LIMIT))

    async def important_news_ws(websocket: WebSocket) -> None:
        infos = service.important_news_info(IMPORTANT_NEWS_LIMIT)
        await websocket.accept()
        await websocket.send_text(_encode_response(infos))

        client = Client(hub)

        async def send(data: bytes) -> None:
            await websocket.send_text(data.decode("utf-8"))

        writer = asyncio.create_task(client.write_data(send))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            client.close()
            await writer

    async def column_info(request: Request) -> Response:
        try:
            params = ParamColumnRequest.from_query(request.query_params)
        except ParamError as exc:
            log.warning("GetColumnInfoHandler err: %s", exc)
            return Response(status_code=200)
        return _ok(service.column_info(params))

    async def news_content(request: Request) -> Response:
        return _ok(service.news_content(request.path_params["id"]))

    routes = [
        Route("/", serve_home, methods=["GET"]),
        Route("/list/article/stocks/batch", stock_info, methods=["GET"]),
        Route("/ImportantNews", important_news, methods=["GET"]),
        WebSocketRoute("/ImportantNews", important_news_ws),
        Route("/list/article/column", column_info, methods=["GET"]),
        Route("/read/article/{id}", news_content, methods=["GET"]),
    ]
    return Starlette(routes=routes, middleware=[Middleware(CORSMiddleware)])


def main(argv: Sequence[str] | None = None) -> None:
    """Connect to the stores and serve the API."""
    from .listing import ListService

    parser = argparse.ArgumentParser(description="Serve news lists and contents.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--redis", default="127.0.0.1:6379", help="Redis address host:port")
    parser.add_argument("--redis-password", default=None)
    parser.add_argument("--redis-db", type=int, default=0)
    parser.add_argument("--mongo", default=DEFAULT_MONGO_URL, help="MongoDB connection URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    index = redis_store.connect(args.redis, args.redis_password, args.redis_db)
    store = mongo_store.connect(args.mongo)
    try:
        app = create_app(ListService(index, store), Hub())
        uvicorn.run(app, host=args.host, port=args.port)
    finally:
        store.close()
        index.close()


if __name__ == "__main__":
    main()