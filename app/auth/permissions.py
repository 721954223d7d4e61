"""
Central registry of allowed actions per role.
"""
ROLE_SCOPES = {
    "member": {"contribute", "manage_cart", "manage_address", "place_order", "wallet_load"},
    "admin":  {"*"},
}

def role_has_scope(role: str, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes
