from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health(request: Request):
    store = request.app.state.store
    return {"status": "ok", "store": type(store).__name__, "connected": store.connected}
