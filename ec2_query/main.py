from fastapi import FastAPI
from ec2_query.api.endpoints import instances
from ec2_query.config.logging_config import configure_logging

configure_logging()

# Create the FastAPI application instance.
app = FastAPI(title="ec2-query")

# Include the endpoints defined in the instances router.
app.include_router(instances.router)
