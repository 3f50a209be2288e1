"""Google Drive tools (16): search, read, list, metadata, create, update,
delete, trash, copy, move, sharing and storage quota."""

from typing import Any

from pydantic import Field

from google_mcp_server.server.formatting import RULE, flag, format_bytes
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import NoParams, ToolParams, ToolRegistry

FILE_LIST_FIELDS = "files(id,name,mimeType,modifiedTime,size,webViewLink)"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Google Workspace formats have no binary content and must be exported
GOOGLE_MIME_EXPORTS = {
    "application/vnd.google-apps.document": "text/plain",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "text/plain",
    "application/vnd.google-apps.drawing": "image/svg+xml",
}


def format_file_entry(file: dict[str, Any]) -> str:
    """Multi-line bullet for one file in a listing."""
    parts = [f"- {file.get('name')}"]
    if file.get("id"):
        parts.append(f"  ID: {file['id']}")
    if file.get("mimeType"):
        parts.append(f"  Type: {file['mimeType']}")
    if file.get("size"):
        parts.append(f"  Size: {file['size']} bytes")
    if file.get("modifiedTime"):
        parts.append(f"  Modified: {file['modifiedTime']}")
    if file.get("webViewLink"):
        parts.append(f"  Link: {file['webViewLink']}")
    return "\n".join(parts)


def _with_link(text: str, file: dict[str, Any]) -> str:
    if file.get("webViewLink"):
        return f"{text}\nLink: {file['webViewLink']}"
    return text


class DriveSearchParams(ToolParams):
    query: str = Field(description="Search query (Drive search syntax supported)")
    max_results: int = Field(default=10, description="Maximum number of results to return (default: 10)")


class FileIdParams(ToolParams):
    file_id: str = Field(description="The ID of the file")


class DriveListParams(ToolParams):
    folder_id: str = Field(default="root", description="Folder ID to list (default: 'root')")
    max_results: int = Field(default=20, description="Maximum number of results to return (default: 20)")


class CreateFolderParams(ToolParams):
    name: str = Field(description="Name of the folder to create")
    parent_id: str | None = Field(default=None, description="Parent folder ID (optional, defaults to root)")


class CreateFileParams(ToolParams):
    name: str = Field(description="Name of the file to create")
    content: str = Field(description="Content of the file")
    mime_type: str = Field(default="text/plain", description="MIME type of the file (default: 'text/plain')")
    parent_id: str | None = Field(default=None, description="Parent folder ID (optional, defaults to root)")


class UpdateFileParams(ToolParams):
    file_id: str = Field(description="The ID of the file to update")
    name: str | None = Field(default=None, description="New name for the file")
    content: str | None = Field(default=None, description="New content for the file")
    description: str | None = Field(default=None, description="New description for the file")


class CopyFileParams(ToolParams):
    file_id: str = Field(description="The ID of the file to copy")
    name: str | None = Field(default=None, description="Name for the copied file")
    parent_id: str | None = Field(default=None, description="Parent folder ID for the copy")


class MoveFileParams(ToolParams):
    file_id: str = Field(description="The ID of the file to move")
    new_parent_id: str = Field(description="The ID of the new parent folder")
    remove_from_current: bool = Field(default=True, description="Remove from current parent (default: true)")


class ShareFileParams(ToolParams):
    file_id: str = Field(description="The ID of the file to share")
    email: str = Field(description="Email address to share with")
    role: str = Field(description="Permission role: reader, writer, commenter, owner")
    type: str = Field(default="user", description="Permission type: user, group, domain, anyone (default: 'user')")


class RemovePermissionParams(ToolParams):
    file_id: str = Field(description="The ID of the file")
    permission_id: str = Field(description="The ID of the permission to remove")


def register_drive_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Drive tools."""

    @registry.tool(
        "drive_search",
        "Search for files in Google Drive using a query string",
        DriveSearchParams,
    )
    async def drive_search(params: DriveSearchParams) -> str:
        response = await google.drive().request(
            "GET",
            "files",
            params={"q": params.query, "pageSize": params.max_results, "fields": FILE_LIST_FIELDS},
        )
        files = response.get("files", [])
        if not files:
            return "No files found matching the query."

        lines = [f"Found {len(files)} file(s):\n"]
        lines.extend(format_file_entry(file) for file in files)
        return "\n".join(lines)

    @registry.tool(
        "drive_read",
        "Read the content of a file from Google Drive. Exports Google Docs/Sheets/Slides as text/csv.",
        FileIdParams,
    )
    async def drive_read(params: FileIdParams) -> str:
        drive = google.drive()
        metadata = await drive.request(
            "GET", f"files/{params.file_id}", params={"fields": "id,name,mimeType,size"}
        )
        mime_type = metadata.get("mimeType")
        export_mime_type = GOOGLE_MIME_EXPORTS.get(mime_type)

        if export_mime_type:
            content = await drive.request_text(
                "GET", f"files/{params.file_id}/export", params={"mimeType": export_mime_type}
            )
        else:
            content = await drive.request_text("GET", f"files/{params.file_id}", params={"alt": "media"})

        return f"File: {metadata.get('name')} ({mime_type})\n{RULE}\n{content}"

    @registry.tool("drive_list", "List files in a specific Google Drive folder", DriveListParams)
    async def drive_list(params: DriveListParams) -> str:
        response = await google.drive().request(
            "GET",
            "files",
            params={
                "q": f"'{params.folder_id}' in parents and trashed = false",
                "pageSize": params.max_results,
                "fields": FILE_LIST_FIELDS,
                "orderBy": "folder,name",
            },
        )
        files = response.get("files", [])
        if not files:
            return "No files found in this folder."

        lines = [f"Listing {len(files)} item(s) in folder '{params.folder_id}':\n"]
        lines.extend(format_file_entry(file) for file in files)
        return "\n".join(lines)

    @registry.tool("drive_file_info", "Get detailed metadata about a file in Google Drive", FileIdParams)
    async def drive_file_info(params: FileIdParams) -> str:
        f = await google.drive().request(
            "GET",
            f"files/{params.file_id}",
            params={
                "fields": "id,name,mimeType,size,createdTime,modifiedTime,webViewLink,"
                "owners,shared,description,starred,trashed"
            },
        )
        owners = f.get("owners") or []
        lines = [
            f"Name: {f.get('name')}",
            f"ID: {f.get('id')}",
            f"Type: {f.get('mimeType')}",
            f"Size: {f['size']} bytes" if f.get("size") else None,
            f"Created: {f.get('createdTime')}",
            f"Modified: {f.get('modifiedTime')}",
            f"Link: {f['webViewLink']}" if f.get("webViewLink") else None,
            f"Shared: {flag(f.get('shared'))}",
            f"Starred: {flag(f.get('starred'))}",
            f"Trashed: {flag(f.get('trashed'))}",
            f"Description: {f['description']}" if f.get("description") else None,
            "Owners: "
            + ", ".join(f"{o.get('displayName')} <{o.get('emailAddress')}>" for o in owners)
            if owners
            else None,
        ]
        return "\n".join(line for line in lines if line)

    @registry.tool("drive_create_folder", "Create a new folder in Google Drive", CreateFolderParams)
    async def drive_create_folder(params: CreateFolderParams) -> str:
        metadata: dict[str, Any] = {"name": params.name, "mimeType": FOLDER_MIME_TYPE}
        if params.parent_id:
            metadata["parents"] = [params.parent_id]

        folder = await google.drive().request(
            "POST", "files", params={"fields": "id,name,webViewLink"}, json_data=metadata
        )
        return _with_link(
            f"Folder created successfully.\nName: {folder.get('name')}\nID: {folder.get('id')}",
            folder,
        )

    @registry.tool("drive_create_file", "Create a new text file in Google Drive", CreateFileParams)
    async def drive_create_file(params: CreateFileParams) -> str:
        metadata: dict[str, Any] = {"name": params.name}
        if params.parent_id:
            metadata["parents"] = [params.parent_id]

        file = await google.drive_upload().upload(
            "POST",
            "files",
            metadata=metadata,
            content=params.content,
            mime_type=params.mime_type,
            params={"fields": "id,name,mimeType,webViewLink"},
        )
        return _with_link(
            f"File created successfully.\nName: {file.get('name')}\nID: {file.get('id')}"
            f"\nType: {file.get('mimeType')}",
            file,
        )

    @registry.tool(
        "drive_update_file",
        "Update file metadata and/or content in Google Drive",
        UpdateFileParams,
    )
    async def drive_update_file(params: UpdateFileParams) -> str:
        metadata: dict[str, Any] = {}
        if params.name:
            metadata["name"] = params.name
        if params.description:
            metadata["description"] = params.description

        query = {"fields": "id,name,mimeType,modifiedTime,webViewLink"}
        if params.content:
            file = await google.drive_upload().upload(
                "PATCH",
                f"files/{params.file_id}",
                metadata=metadata,
                content=params.content,
                mime_type="text/plain",
                params=query,
            )
        else:
            file = await google.drive().request(
                "PATCH", f"files/{params.file_id}", params=query, json_data=metadata
            )

        return _with_link(
            f"File updated successfully.\nName: {file.get('name')}\nID: {file.get('id')}"
            f"\nModified: {file.get('modifiedTime')}",
            file,
        )

    @registry.tool("drive_delete", "Permanently delete a file from Google Drive", FileIdParams)
    async def drive_delete(params: FileIdParams) -> str:
        await google.drive().request("DELETE", f"files/{params.file_id}")
        return f"File {params.file_id} deleted permanently."

    async def _set_trashed(file_id: str, trashed: bool) -> dict[str, Any]:
        return await google.drive().request(
            "PATCH",
            f"files/{file_id}",
            params={"fields": "id,name,trashed"},
            json_data={"trashed": trashed},
        )

    @registry.tool("drive_trash", "Move a file to trash in Google Drive", FileIdParams)
    async def drive_trash(params: FileIdParams) -> str:
        file = await _set_trashed(params.file_id, True)
        return f"File '{file.get('name')}' ({file.get('id')}) moved to trash."

    @registry.tool("drive_untrash", "Restore a file from trash in Google Drive", FileIdParams)
    async def drive_untrash(params: FileIdParams) -> str:
        file = await _set_trashed(params.file_id, False)
        return f"File '{file.get('name')}' ({file.get('id')}) restored from trash."

    @registry.tool("drive_copy", "Copy a file in Google Drive", CopyFileParams)
    async def drive_copy(params: CopyFileParams) -> str:
        body: dict[str, Any] = {}
        if params.name:
            body["name"] = params.name
        if params.parent_id:
            body["parents"] = [params.parent_id]

        file = await google.drive().request(
            "POST",
            f"files/{params.file_id}/copy",
            params={"fields": "id,name,mimeType,webViewLink"},
            json_data=body,
        )
        return _with_link(
            f"File copied successfully.\nName: {file.get('name')}\nID: {file.get('id')}"
            f"\nType: {file.get('mimeType')}",
            file,
        )

    @registry.tool("drive_move", "Move a file to a different folder in Google Drive", MoveFileParams)
    async def drive_move(params: MoveFileParams) -> str:
        drive = google.drive()

        remove_parents = None
        if params.remove_from_current:
            current = await drive.request("GET", f"files/{params.file_id}", params={"fields": "parents"})
            remove_parents = ",".join(current.get("parents", [])) or None

        file = await drive.request(
            "PATCH",
            f"files/{params.file_id}",
            params={
                "addParents": params.new_parent_id,
                "removeParents": remove_parents,
                "fields": "id,name,parents",
            },
            json_data={},
        )
        return (
            f"File moved successfully.\nName: {file.get('name')}\nID: {file.get('id')}"
            f"\nNew parent(s): {', '.join(file.get('parents', []))}"
        )

    @registry.tool("drive_share", "Share a file with someone in Google Drive", ShareFileParams)
    async def drive_share(params: ShareFileParams) -> str:
        permission = await google.drive().request(
            "POST",
            f"files/{params.file_id}/permissions",
            params={"sendNotificationEmail": True, "fields": "id,role,type,emailAddress"},
            json_data={"role": params.role, "type": params.type, "emailAddress": params.email},
        )
        return (
            f"File shared successfully.\nPermission ID: {permission.get('id')}"
            f"\nRole: {permission.get('role')}\nType: {permission.get('type')}"
            f"\nEmail: {permission.get('emailAddress') or params.email}"
        )

    @registry.tool(
        "drive_list_permissions",
        "List sharing permissions on a file in Google Drive",
        FileIdParams,
    )
    async def drive_list_permissions(params: FileIdParams) -> str:
        response = await google.drive().request(
            "GET",
            f"files/{params.file_id}/permissions",
            params={"fields": "permissions(id,role,type,emailAddress,displayName)"},
        )
        permissions = response.get("permissions", [])
        if not permissions:
            return "No permissions found for this file."

        lines = [f"Found {len(permissions)} permission(s):\n"]
        for perm in permissions:
            parts = [f"- Role: {perm.get('role')}, Type: {perm.get('type')}"]
            if perm.get("emailAddress"):
                parts.append(f"  Email: {perm['emailAddress']}")
            if perm.get("displayName"):
                parts.append(f"  Name: {perm['displayName']}")
            parts.append(f"  Permission ID: {perm.get('id')}")
            lines.append("\n".join(parts))
        return "\n".join(lines)

    @registry.tool(
        "drive_remove_permission",
        "Remove a sharing permission from a file in Google Drive",
        RemovePermissionParams,
    )
    async def drive_remove_permission(params: RemovePermissionParams) -> str:
        await google.drive().request(
            "DELETE", f"files/{params.file_id}/permissions/{params.permission_id}"
        )
        return f"Permission {params.permission_id} removed from file {params.file_id}."

    @registry.tool("drive_about", "Get Google Drive storage quota and user info", NoParams)
    async def drive_about(params: NoParams) -> str:
        response = await google.drive().request("GET", "about", params={"fields": "storageQuota,user"})
        quota = response.get("storageQuota") or {}
        user = response.get("user") or {}

        lines = [
            f"User: {user.get('displayName') or 'Unknown'} <{user.get('emailAddress') or 'Unknown'}>",
            f"Storage Used: {format_bytes(quota.get('usage'))}",
            f"Storage Limit: {format_bytes(quota.get('limit'))}",
            f"Drive Usage: {format_bytes(quota.get('usageInDrive'))}",
            f"Trash Usage: {format_bytes(quota.get('usageInDriveTrash'))}",
        ]
        return "\n".join(lines)
