from fastapi import FastAPI

from dishbook.api import matching, verification

app = FastAPI(title="Dishbook", version="0.1.0")


# Include routers
app.include_router(verification.router)
app.include_router(matching.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
