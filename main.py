import logging
from typing import Optional

import requests
from fastapi import Cookie, Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pymongo.database import Database

import config
import database
from auth import (
    AuthRedirect,
    current_account,
    extract_token,
    get_account_by_token,
    get_all_users,
    get_user,
    login_account,
    logout_account,
    register_account,
    require_admin,
)
from countries import fetch_countries
from dashboard import (
    get_trips_by_travel_style,
    get_trips_created_per_day,
    get_user_growth_per_day,
    get_users_and_trips_stats,
)
from database import get_db
from itinerary import (
    BUDGET_OPTIONS,
    GROUP_TYPES,
    INTERESTS,
    TRAVEL_STYLES,
    create_trip,
    validate_trip_form,
)
from presenter import stats_card, trip_cards, trip_detail_view
from schemas import AuthResponse, LoginRequest, RegisterRequest, TripFormData
from trips import get_all_trips, get_trip_by_id, page_offset

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Tourvisto API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SESSION_COOKIE = "session"
DASHBOARD_PREVIEW_SIZE = 4
RELATED_TRIPS_SIZE = 4


@app.exception_handler(AuthRedirect)
async def auth_redirect_handler(request: Request, exc: AuthRedirect):
    return RedirectResponse(url=exc.location, status_code=303)


# ----------------------
# Routes
# ----------------------

@app.get("/")
def root():
    return {"message": "Tourvisto API is running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if config.DATABASE_URL else "❌ Not Set",
        "database_name": "✅ Set" if config.DATABASE_NAME else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        if database.db is not None:
            response["database"] = "✅ Available"
            response["connection_status"] = "Connected"
            response["collections"] = database.db.list_collection_names()[:10]
    except Exception as e:
        response["database"] = f"⚠️ Error: {str(e)[:80]}"
    return response


# ---- Auth ----

def _auth_response(response: Response, account: dict, token: str) -> AuthResponse:
    response.set_cookie(SESSION_COOKIE, token, httponly=True, samesite="lax")
    return AuthResponse(token=token, name=account.get("name", ""), email=account.get("email", ""))


@app.post("/api/auth/register", response_model=AuthResponse)
def register(req: RegisterRequest, response: Response, db: Database = Depends(get_db)):
    account, token = register_account(db, req.name, str(req.email), req.password, req.image_url)
    return _auth_response(response, account, token)


@app.post("/api/auth/login", response_model=AuthResponse)
def login(req: LoginRequest, response: Response, db: Database = Depends(get_db)):
    account, token = login_account(db, str(req.email), req.password)
    return _auth_response(response, account, token)


@app.post("/api/auth/logout")
def logout(
    response: Response,
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
    db: Database = Depends(get_db),
):
    if not logout_account(db, extract_token(authorization, session)):
        raise HTTPException(status_code=401, detail="Unauthorized")
    response.delete_cookie(SESSION_COOKIE)
    return {"ok": True}


@app.get("/api/me")
def me(
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
    db: Database = Depends(get_db),
):
    account = get_account_by_token(db, extract_token(authorization, session))
    return get_user(db, account)


# ---- Planner ----

@app.get("/api/options")
def form_options():
    return {
        "travel_styles": TRAVEL_STYLES,
        "interests": INTERESTS,
        "budget_options": BUDGET_OPTIONS,
        "group_types": GROUP_TYPES,
    }


@app.get("/api/countries")
def countries():
    try:
        return [country.model_dump() for country in fetch_countries()]
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error fetching countries: {e}")
        raise HTTPException(status_code=502, detail="Country list unavailable")


@app.post("/api/create-trip")
def create_trip_action(
    form: TripFormData,
    account: dict = Depends(current_account),
    db: Database = Depends(get_db),
):
    message = validate_trip_form(form)
    if message:
        return JSONResponse(status_code=400, content={"error": message})

    try:
        trip_id = create_trip(db, form, str(account["_id"]))
    except Exception as e:
        logger.error(f"Error in creating trip: {e}")
        return JSONResponse(status_code=502, content={"error": "Failed to create trip"})
    return {"id": trip_id}


# ---- Trips ----

def _trips_page(db: Database, page: int) -> dict:
    trips, total = get_all_trips(db, config.TRIPS_PAGE_SIZE, page_offset(page, config.TRIPS_PAGE_SIZE))
    return {
        "trips": [card.model_dump() for card in trip_cards(trips)],
        "total": total,
        "page": page,
        "page_size": config.TRIPS_PAGE_SIZE,
    }


@app.get("/api/trips")
def list_trips(page: int = Query(1, ge=1), db: Database = Depends(get_db)):
    return _trips_page(db, page)


@app.get("/api/trips/{trip_id}")
def trip_detail(trip_id: str, db: Database = Depends(get_db)):
    trip = get_trip_by_id(db, trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    related, _ = get_all_trips(db, RELATED_TRIPS_SIZE, 0)
    view = trip_detail_view(trip, related)
    if view is None:
        raise HTTPException(status_code=500, detail="Trip data could not be parsed")
    return view


# ---- Admin ----

@app.get("/api/admin/dashboard")
def dashboard(profile: dict = Depends(require_admin), db: Database = Depends(get_db)):
    stats = get_users_and_trips_stats(db)
    latest_trips, _ = get_all_trips(db, DASHBOARD_PREVIEW_SIZE, 0)
    latest_users, _ = get_all_users(db, DASHBOARD_PREVIEW_SIZE, 0)

    cards = [
        stats_card("Total Users", stats.total_users, stats.users_joined.current_month, stats.users_joined.last_month),
        stats_card("Total Trips", stats.total_trips, stats.trips_created.current_month, stats.trips_created.last_month),
        stats_card("Active Users", stats.user_role.total, stats.user_role.current_month, stats.user_role.last_month),
    ]
    return {
        "user": profile,
        "stats": stats.model_dump(),
        "stats_cards": [card.model_dump() for card in cards],
        "trips": [card.model_dump() for card in trip_cards(latest_trips)],
        "users": latest_users,
        "user_growth": get_user_growth_per_day(db),
        "trips_growth": get_trips_created_per_day(db),
        "trips_by_travel_style": get_trips_by_travel_style(db),
    }


@app.get("/api/admin/users")
def all_users(
    page: int = Query(1, ge=1),
    profile: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    users, total = get_all_users(db, config.USERS_PAGE_SIZE, page_offset(page, config.USERS_PAGE_SIZE))
    return {"users": users, "total": total, "page": page, "page_size": config.USERS_PAGE_SIZE}


@app.get("/api/admin/trips")
def admin_trips(
    page: int = Query(1, ge=1),
    profile: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    return _trips_page(db, page)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
