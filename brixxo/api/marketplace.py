"""Endpoint wrappers for the marketplace backend.

Each function takes the ``BackendClient`` to call through so that the caller
decides whose token is used. Responses are unwrapped the same forgiving way
for every resource: the backend sometimes nests the record under a key and
sometimes returns it bare.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


def _unwrap(payload, key):
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload


def _unwrap_list(payload, key) -> List[Dict]:
    if isinstance(payload, list):
        return payload
    return payload.get(key) or payload.get("data") or []


# -- auth ---------------------------------------------------------------------

def login(client, email: str, password: str) -> Dict:
    """Returns ``{token, user}``."""
    return client.post("/auth/login", {"email": email, "password": password})


def register(client, name: str, email: str, password: str, role: str) -> Dict:
    return client.post(
        "/register",
        {"name": name, "email": email, "password": password, "role": role},
    )


def get_profile(client) -> Dict:
    return _unwrap(client.get("/users/profile"), "user")


# -- requirements ---------------------------------------------------------------

def submit_requirement(client, fields: Dict[str, str], files) -> Dict:
    """Multipart POST of a new requirement with its attachments."""
    return client.upload("/requirements", data=fields, files=files)


def get_public_requirement(client, requirement_id: str) -> Dict:
    return client.get(f"/requirements/{requirement_id}/public")


def get_requirement(client, requirement_id: str) -> Dict:
    return client.get(f"/requirements/{requirement_id}")


def list_my_requirements(client) -> List[Dict]:
    return _unwrap_list(client.get("/requirements/my"), "requirements")


def list_open_requirements(client, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
    return _unwrap_list(client.get("/requirements/open", params=params), "requirements")


def list_requirement_quotes(client, requirement_id: str) -> List[Dict]:
    return _unwrap_list(client.get(f"/requirements/{requirement_id}/quotes"), "quotes")


def select_quote(client, requirement_id: str, quote_id: str) -> Dict:
    return client.put(f"/requirements/{requirement_id}/select-quote", {"quoteId": quote_id})


# -- quotes -------------------------------------------------------------------

def submit_quote(client, payload: Dict) -> Dict:
    return client.post("/quotes", payload)


# -- inquiries ----------------------------------------------------------------

def list_company_inquiries(client, status: Optional[str] = None) -> List[Dict]:
    params = {"status": status} if status else None
    return _unwrap_list(client.get("/inquiries/company", params=params), "inquiries")


def list_my_inquiries(client) -> List[Dict]:
    return _unwrap_list(client.get("/inquiries/my"), "inquiries")


def create_inquiry(client, payload: Dict) -> Dict:
    return client.post("/inquiries", payload)


def update_inquiry_status(client, inquiry_id: str, status: str, notes: Optional[str] = None) -> Dict:
    """Returns the server's copy of the inquiry after the transition."""
    body: Dict[str, Any] = {"status": status}
    if notes:
        body["notes"] = notes
    return _unwrap(client.put(f"/inquiries/{inquiry_id}/status", body), "inquiry")


# -- companies ----------------------------------------------------------------

def list_companies(client, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
    return _unwrap_list(client.get("/companies", params=params), "companies")


def get_company(client, company_id: str) -> Dict:
    return _unwrap(client.get(f"/companies/{company_id}"), "company")


def get_my_company(client) -> Dict:
    return _unwrap(client.get("/companies/my/company"), "company")


def create_company(client, payload: Dict) -> Dict:
    return _unwrap(client.post("/companies", payload), "company")


def update_my_company(client, payload: Dict) -> Dict:
    return _unwrap(client.put("/companies/my/company", payload), "company")


def delete_my_company(client) -> Dict:
    return client.delete("/companies/my/company")


def verify_company(client, company_id: str) -> Dict:
    """Admin only; sets the company's verification flag."""
    return _unwrap(client.put(f"/companies/admin/verify/{company_id}"), "company")


# -- professionals ------------------------------------------------------------

def list_professionals(client, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
    return _unwrap_list(client.get("/professionals", params=params), "professionals")


def get_professional(client, professional_id: str) -> Dict:
    return _unwrap(client.get(f"/professionals/{professional_id}"), "professional")


def get_my_professional_profile(client) -> Dict:
    return _unwrap(client.get("/professionals/my/profile"), "professional")


def create_professional(client, payload: Dict) -> Dict:
    return _unwrap(client.post("/professionals", payload), "professional")


def update_my_professional_profile(client, payload: Dict) -> Dict:
    return _unwrap(client.put("/professionals/my/profile", payload), "professional")


def verify_professional(client, professional_id: str) -> Dict:
    return _unwrap(client.put(f"/professionals/{professional_id}/verify"), "professional")


# -- company projects -----------------------------------------------------------

def search_projects(client, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
    return _unwrap_list(client.get("/projects/search", params=params), "projects")


def get_project(client, project_id: str) -> Dict:
    return _unwrap(client.get(f"/projects/{project_id}"), "project")


def list_my_projects(client) -> List[Dict]:
    return _unwrap_list(client.get("/projects/my/company"), "projects")


def create_project(client, payload: Dict) -> Dict:
    return _unwrap(client.post("/projects/company", payload), "project")


def update_project(client, project_id: str, payload: Dict) -> Dict:
    return _unwrap(client.put(f"/projects/company/{project_id}", payload), "project")


def delete_project(client, project_id: str) -> Dict:
    return client.delete(f"/projects/company/{project_id}")


def remove_project_image(client, project_id: str, image_url: str) -> List[str]:
    """Returns the project's remaining image URLs."""
    data = client.delete(f"/projects/company/{project_id}/images", {"imageUrl": image_url})
    return data.get("images") or []


# -- reviews ------------------------------------------------------------------

def list_project_reviews(client, project_id: str) -> List[Dict]:
    return _unwrap_list(client.get(f"/reviews/project/{project_id}"), "reviews")


def create_project_review(client, project_id: str, payload: Dict) -> Dict:
    return _unwrap(client.post(f"/reviews/project/{project_id}", payload), "review")


# -- uploads ------------------------------------------------------------------

def upload_images(client, files, multiple: bool = False) -> List[str]:
    """Upload images and return the hosted URLs."""
    endpoint = "/uploads/multiple" if multiple else "/uploads/images"
    data = client.upload(endpoint, files=files)
    return data.get("urls") or (data.get("data") or {}).get("urls") or []


# -- messages and notifications -----------------------------------------------

def list_conversations(client) -> List[Dict]:
    return _unwrap_list(client.get("/messages/conversations/all"), "conversations")


def list_messages(client, conversation_id: str) -> List[Dict]:
    return _unwrap_list(client.get(f"/messages/conversation/{conversation_id}"), "messages")


def mark_conversation_read(client, conversation_id: str) -> Dict:
    return client.put(f"/messages/conversation/{conversation_id}/read")


def send_message(client, conversation_id: str, content: str) -> Dict:
    data = client.post(f"/conversations/{conversation_id}/messages", {"content": content})
    return _unwrap(data, "message")


def unread_notification_count(client) -> int:
    data = client.get("/notifications", params={"unreadOnly": "true"})
    return int(data.get("unreadCount") or 0)
