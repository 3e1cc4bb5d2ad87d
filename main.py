import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel, Field
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.background import BackgroundTask

import admin
import database
import file_proxy
import movies
from database import get_db
from errors import CatalogError, ValidationError
from schemas import MovieUpdate

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        database.connect()
    except Exception:
        logger.critical("MongoDB connection error", exc_info=True)
        raise
    yield
    database.close()


app = FastAPI(title="CineKahani API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error responses

@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Server error"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=400, content={"message": message})


# Request bodies

class MovieCreate(BaseModel):
    imageURL: Optional[str] = None
    movieName: Optional[str] = None
    movieDescription: Optional[str] = None
    movieLink: Optional[str] = None
    movieType: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)


@app.get("/api/ping", response_class=PlainTextResponse)
def ping():
    return "Server is up and running"


# Movies

@app.get("/api/movies")
def list_movies(name: Optional[str] = None, db: Database = Depends(get_db)):
    if name:
        return movies.find_by_name(db, name)
    return movies.list_movies(db)


@app.post("/api/movies", status_code=201)
def create_movie(movie: MovieCreate, db: Database = Depends(get_db)):
    movies.create_movie(db, movie.model_dump())
    return {"message": "Movie added successfully"}


@app.get("/api/movies/{movie_id}")
def get_movie(movie_id: str, db: Database = Depends(get_db)):
    return movies.find_by_id(db, movie_id)


@app.put("/api/movies/{movie_id}")
def update_movie(movie_id: str, updates: MovieUpdate, db: Database = Depends(get_db)):
    movie = movies.update_movie(db, movie_id, updates.changes())
    return {"message": "Movie updated successfully", "movie": movie}


@app.delete("/api/movies/{movie_id}")
def delete_movie(movie_id: str, db: Database = Depends(get_db)):
    movies.delete_movie(db, movie_id)
    return {"message": "Movie deleted successfully"}


@app.get("/api/search/movie")
def search_movie_names(db: Database = Depends(get_db)):
    return {"movies": movies.distinct_names(db)}


@app.get("/movie-details")
def movie_details(movie_id: Optional[str] = Query(None, alias="movieId"), db: Database = Depends(get_db)):
    if not movie_id:
        raise ValidationError("Movie ID is required")
    return movies.find_by_id(db, movie_id)


# Visit counters

@app.post("/api/user-visited")
def user_visited(db: Database = Depends(get_db)):
    visits = admin.record_visit(db)
    return {"message": "User visit count updated successfully", "userVisited": visits}


@app.get("/api/user-visited")
def user_visits(db: Database = Depends(get_db)):
    return admin.get_stats(db)


# File proxy

@app.get("/download")
def download_movie(movie_id: Optional[str] = Query(None, alias="movieId")):
    headers = file_proxy.attachment_headers(movie_id)
    upstream = file_proxy.open_stream(movie_id)
    try:
        return StreamingResponse(
            upstream.iter_content(chunk_size=file_proxy.CHUNK_SIZE),
            media_type="application/octet-stream",
            headers=headers,
            background=BackgroundTask(upstream.close),
        )
    except Exception:
        upstream.close()
        raise


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
