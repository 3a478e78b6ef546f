"""
Health endpoint.
"""

import time

from aiohttp import web

from productsvc.service.api.handlers import BaseHandler


class HealthHandler(BaseHandler):
    """Handler for the health check endpoint."""

    def __init__(self, service):
        super().__init__(service)
        self._start_time = time.time()

    async def health(self, request: web.Request) -> web.Response:
        """
        GET /health

        Returns service status. Does not touch the database.
        """
        from productsvc import __version__

        data = {
            "status": "ok",
            "version": __version__,
            "environment": self.service.environment,
            "uptime_seconds": round(time.time() - self._start_time, 2),
        }
        return await self.json_response(data, request=request)
