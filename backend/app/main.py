import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.orm import Session

from . import config, crud, schemas
from .database import engine, get_db, init_db
from .errors import NotFoundError, ValidationError, register_error_handlers
from .logging_config import setup_logging
from .utils import parse_id, parse_pagination
from .validators import validate_payload


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db(engine)
    logger.info("Database ready at {}", engine.url)
    yield


app = FastAPI(title="Catalog API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        duration = (time.perf_counter() - start) * 1000
        logger.info("{} {} {} {:.1f} ms", request.method, request.url.path, status_code, duration)


def _page(items, total, p, out_model):
    return {
        "data": [out_model.model_validate(i) for i in items],
        "page": p.page,
        "limit": p.limit,
        "total": total,
        "totalPages": p.total_pages(total),
    }


# -------------------- PRODUCTS --------------------
@app.post("/products", status_code=status.HTTP_201_CREATED, response_model=schemas.ProductOut)
def create_product(payload: dict, db: Session = Depends(get_db)):
    product, errors = validate_payload(schemas.ProductCreate, payload)
    if errors:
        raise ValidationError(errors)
    return crud.create_product(db, product)


@app.get("/products", response_model=schemas.ProductPage)
def list_products(
    page: str | None = None,
    limit: str | None = None,
    q: str | None = None,
    db: Session = Depends(get_db),
):
    p = parse_pagination({"page": page, "limit": limit, "q": q})
    items, total = crud.list_products(db, offset=p.offset, limit=p.limit, search=p.q)
    return _page(items, total, p, schemas.ProductOut)


@app.get("/products/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    pid = parse_id(product_id)
    obj = crud.get_product(db, pid) if pid is not None else None
    if obj is None:
        raise NotFoundError("Product not found")
    return obj


# -------------------- CLIENTS --------------------
@app.post("/clients", status_code=status.HTTP_201_CREATED, response_model=schemas.ClientOut)
def create_client(payload: dict, db: Session = Depends(get_db)):
    client, errors = validate_payload(schemas.ClientCreate, payload)
    if errors:
        raise ValidationError(errors)
    return crud.create_client(db, client)


@app.get("/clients", response_model=schemas.ClientPage)
def list_clients(
    page: str | None = None,
    limit: str | None = None,
    q: str | None = None,
    db: Session = Depends(get_db),
):
    p = parse_pagination({"page": page, "limit": limit, "q": q})
    items, total = crud.list_clients(db, offset=p.offset, limit=p.limit, search=p.q)
    return _page(items, total, p, schemas.ClientOut)


@app.get("/clients/{client_id}", response_model=schemas.ClientOut)
def get_client(client_id: str, db: Session = Depends(get_db)):
    cid = parse_id(client_id)
    obj = crud.get_client(db, cid) if cid is not None else None
    if obj is None:
        raise NotFoundError("Client not found")
    return obj


# -------------------- HEALTH --------------------
@app.get("/health")
def health():
    return {"status": "ok"}
