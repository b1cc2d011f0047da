"""AWS Lambda entry point.

Mangum adapts API Gateway / Function URL events to ASGI so the proxy
runs on Lambda unchanged. Point the function handler at
`src.lambda_handler.handler`.
"""

from mangum import Mangum

from src.main import app

handler = Mangum(app, lifespan="auto")
