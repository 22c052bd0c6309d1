"""
BizTime Backend — Middleware Package
======================================

Middleware Chain (request direction):
    Request → [Request ID] → [Access Log] → [Rate Limit] → [GZip] → [CORS] → Route

    - Request ID sets the correlation ID that everything after it uses,
      429 rejections included
    - Access Log records method, path, status and duration
    - Rate Limit rejects over-quota clients before any route work
"""
