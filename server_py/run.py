import uvicorn
from admissions_chat.core.config import settings

if __name__ == "__main__":
    # Tables are created in the application lifespan
    uvicorn.run(
        "admissions_chat.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=False,
    )
