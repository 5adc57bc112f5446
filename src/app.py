"""
src/app.py
"""


import json
import logging
import re
from collections import deque
from typing import Any, Deque, Dict, List, Optional

import gradio as gr

from access.authenticator import CodeAuthenticator
from access.delegation import DelegationAuthority
from access.errors import StoreCorruptError, ValidationError
from access.models import AuditEntry
from access.resolver import RoleResolver, RoleWatcher
from access.store import CredentialStore
from config import CODE_PATTERN, DEVELOPER_CODE, DEFAULT_ADMIN_CODE, DEFAULT_OWNER_CODE, STORE_PATH, Role, configure_logging
from storage.backends import SqliteBackend


logger = logging.getLogger(__name__)

APP_TITLE = "Role Guard (Local Demo)"
APP_DESC = (
    "Enter a 6-digit access code to switch roles. "
    "Sections below appear or disappear depending on the active role; "
    "higher-privilege roles can manage the codes of lower ones."
)

# region -> (required role or None, title, body)
DEMO_SECTIONS: Dict[str, tuple] = {
    "public": (None, "Public Information", "Visible to everyone, regardless of role."),
    "admin": (Role.ADMIN.value, "Admin Dashboard", "Requires Admin role or higher. Manage custom role codes."),
    "owner": (Role.OWNER.value, "Owner Controls", "Requires Owner role or higher. Manage the Admin code and custom roles."),
    "developer": (Role.DEVELOPER.value, "Developer Tools", "Requires Developer role. Manage the Owner code; publishing enabled."),
    "beta": ("betaTester", "Beta Features", "Only visible to the betaTester role."),
}


class RoleGuardApp:
    """Wires one CredentialStore to the resolver, authenticator and delegation authority."""

    def __init__(self, store: CredentialStore):

        self.store = store
        self.resolver = RoleResolver(store)
        self.authenticator = CodeAuthenticator(store)
        self.authority = DelegationAuthority(store)
        self.activity: Deque[AuditEntry] = deque(maxlen=10)
        self.watcher = RoleWatcher(store, self._on_role_change)

    def _on_role_change(self, old: str, new: str) -> None:

        self.activity.append(AuditEntry(step="role_changed", ok=True, detail=f"{old} -> {new}"))

    def _registered(self) -> Optional[bool]:
        """None when the store cannot be read."""

        try:
            return self.resolver.is_registered()
        except StoreCorruptError:
            return None

    def _result(self, audit: List[AuditEntry]) -> Dict[str, Any]:

        return {
            "current_role": self.resolver.current_role(),
            "registered_role": self._registered(),
            "audit_log": [a.model_dump() for a in audit],
        }

    # --- Handlers --------------------------------------------------------------
    def submit_code(self, code: str) -> Dict[str, Any]:
        """
        Access form: check the format (as the form does), then try to unlock a role.
        """

        code = (code or "").strip()

        if not re.fullmatch(CODE_PATTERN, code):
            return self._result([AuditEntry(step="submit_code", ok=False, detail="Code must be exactly 6 digits.")])

        try:
            if self.authenticator.try_become_role(code):
                entry = AuditEntry(step="submit_code", ok=True, detail=f"You are now a {self.resolver.current_role()}.")
            else:
                entry = AuditEntry(step="submit_code", ok=False, detail="The code you entered doesn't match any role.")
        except StoreCorruptError as e:
            entry = AuditEntry(step="submit_code", ok=False, detail=str(e))

        return self._result([entry])

    def rotate_code(self, target_role: str, new_code: str) -> Dict[str, Any]:

        try:
            self.authority.rotate_code((target_role or "").strip(), (new_code or "").strip())
            entry = AuditEntry(step="rotate_code", ok=True, detail=f"The {target_role} access code has been saved.")
        except (ValidationError, PermissionError, StoreCorruptError) as e:
            entry = AuditEntry(step="rotate_code", ok=False, detail=str(e))

        return self._result([entry])

    def add_custom_role(self, name: str, code: str) -> Dict[str, Any]:

        try:
            stored = self.authority.add_custom_role(name or "", (code or "").strip())
            entry = AuditEntry(step="add_custom_role", ok=True, detail=f'The role "{stored}" has been added.')
        except (ValidationError, PermissionError, StoreCorruptError) as e:
            entry = AuditEntry(step="add_custom_role", ok=False, detail=str(e))

        return self._result([entry])

    def delete_custom_role(self, name: str) -> Dict[str, Any]:

        name = (name or "").strip()

        try:
            removed = self.authority.delete_custom_role(name)
            detail = f'The role "{name}" has been removed.' if removed else f'No custom role named "{name}".'
            entry = AuditEntry(step="delete_custom_role", ok=True, detail=detail)
        except (PermissionError, ValidationError, StoreCorruptError) as e:
            entry = AuditEntry(step="delete_custom_role", ok=False, detail=str(e))

        return self._result([entry])

    # --- Views -----------------------------------------------------------------
    def role_badge(self) -> str:
        """Markdown role indicator; developer also gets the publish badge."""

        role = self.resolver.current_role()
        badge = f"**Current Role:** `{role}`"

        if role == Role.DEVELOPER.value:
            badge += " · `Publish Enabled`"
        registered = self._registered()
        if registered is None:
            badge += " · _(credential store unreadable)_"
        elif not registered:
            badge += " · _(not a registered role)_"

        return badge

    def section_visibility(self) -> Dict[str, bool]:

        return self.resolver.visible_regions({region: entry[0] for region, entry in DEMO_SECTIONS.items()})

    def manage_view(self) -> Dict[str, Any]:

        try:
            codes: Dict[str, Any] = self.authority.manageable_codes()
        except StoreCorruptError as e:
            codes = {"error": str(e)}

        return {
            "codes": codes,
            "can_add_custom_roles": self.authority.can_create_custom_roles(),
            "activity": [a.model_dump() for a in self.activity],
        }


def build_ui(guard: RoleGuardApp):

    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)
        badge = gr.Markdown(guard.role_badge())

        # Gated sections
        visible = guard.section_visibility()
        groups = []
        for region, (required, title, body) in DEMO_SECTIONS.items():
            with gr.Group(visible=visible[region]) as group:
                gr.Markdown(f"### {title}\n{body}")
            groups.append(group)

        with gr.Tab("Access"):
            code_in = gr.Textbox(label="Access code", placeholder="Enter 6-digit code", max_lines=1)
            enter = gr.Button("Enter", variant="primary")

        with gr.Tab("Manage"):
            manage = gr.JSON(label="Codes you may manage", value=guard.manage_view())
            with gr.Row():
                target_in = gr.Textbox(label="Role", placeholder="owner / admin / custom role")
                new_code_in = gr.Textbox(label="New code", placeholder="6-digit code")
                rotate = gr.Button("Save code")
            with gr.Row():
                role_name_in = gr.Textbox(label="New custom role name")
                role_code_in = gr.Textbox(label="Code", placeholder="6-digit code")
                add = gr.Button("Add custom role")
            with gr.Row():
                delete_name_in = gr.Textbox(label="Custom role to delete")
                delete = gr.Button("Delete", variant="stop")

        out = gr.Code(label="Result", language="json")

        gr.Markdown(
            f"Test codes: Developer `{DEVELOPER_CODE}`, Owner `{DEFAULT_OWNER_CODE}`, "
            f"Admin `{DEFAULT_ADMIN_CODE}`, Beta Tester `123456` (defaults, can be changed)."
        )

        def refresh(result: Dict[str, Any]):
            vis = guard.section_visibility()
            return (
                [json.dumps(result, indent=2), guard.role_badge(), guard.manage_view()]
                + [gr.update(visible=vis[region]) for region in DEMO_SECTIONS]
            )

        outputs = [out, badge, manage] + groups

        enter.click(fn=lambda code: refresh(guard.submit_code(code)), inputs=[code_in], outputs=outputs)
        rotate.click(
            fn=lambda target, code: refresh(guard.rotate_code(target, code)),
            inputs=[target_in, new_code_in],
            outputs=outputs,
        )
        add.click(
            fn=lambda name, code: refresh(guard.add_custom_role(name, code)),
            inputs=[role_name_in, role_code_in],
            outputs=outputs,
        )
        delete.click(fn=lambda name: refresh(guard.delete_custom_role(name)), inputs=[delete_name_in], outputs=outputs)

    return demo

def app(store: Optional[CredentialStore] = None):

    store = store or CredentialStore(SqliteBackend(STORE_PATH))
    logger.info("Using credential store at %s", getattr(store.backend, "path", "memory"))

    return build_ui(RoleGuardApp(store))


if __name__ == "__main__":

    configure_logging()
    app().launch()

# EOF
