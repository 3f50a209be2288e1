"""Google Contacts tools (6), backed by the People API. Results are JSON."""

from typing import Any

from pydantic import Field

from google_mcp_server.server.formatting import to_json
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import NoParams, ToolParams, ToolRegistry

LIST_PERSON_FIELDS = "names,emailAddresses,phoneNumbers"
DETAIL_PERSON_FIELDS = "names,emailAddresses,phoneNumbers,addresses,organizations,biographies"
RESOURCE_NAME_DESCRIPTION = "Contact resource name, e.g. 'people/c1234'"


def drop_none(value: dict[str, Any]) -> dict[str, Any]:
    return {key: item for key, item in value.items() if item is not None}


class ListContactsParams(ToolParams):
    max_results: int = Field(default=20, description="Max contacts to return (default 20)")
    query: str | None = Field(default=None, description="Search query to filter contacts")


class ResourceNameParams(ToolParams):
    resource_name: str = Field(description=RESOURCE_NAME_DESCRIPTION)


class CreateContactParams(ToolParams):
    given_name: str = Field(description="First name")
    family_name: str | None = Field(default=None, description="Last name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")
    organization: str | None = Field(default=None, description="Organization/company name")


class UpdateContactParams(ResourceNameParams):
    given_name: str | None = Field(default=None, description="First name")
    family_name: str | None = Field(default=None, description="Last name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")


def register_contacts_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Contacts tools."""

    @registry.tool("contacts_list", "List Google Contacts or search by query", ListContactsParams)
    async def contacts_list(params: ListContactsParams) -> str:
        people = google.people()
        if params.query:
            data = await people.request(
                "GET",
                "people:searchContacts",
                params={
                    "query": params.query,
                    "pageSize": params.max_results,
                    "readMask": LIST_PERSON_FIELDS,
                },
            )
            results = [result.get("person") for result in data.get("results") or []]
        else:
            data = await people.request(
                "GET",
                "people/me/connections",
                params={"pageSize": params.max_results, "personFields": LIST_PERSON_FIELDS},
            )
            results = data.get("connections") or []
        return to_json(results)

    @registry.tool(
        "contacts_get", "Get a specific Google Contact by resource name", ResourceNameParams
    )
    async def contacts_get(params: ResourceNameParams) -> str:
        data = await google.people().request(
            "GET", params.resource_name, params={"personFields": DETAIL_PERSON_FIELDS}
        )
        return to_json(data)

    @registry.tool("contacts_create", "Create a new Google Contact", CreateContactParams)
    async def contacts_create(params: CreateContactParams) -> str:
        body = drop_none(
            {
                "names": [drop_none({"givenName": params.given_name, "familyName": params.family_name})],
                "emailAddresses": [{"value": params.email}] if params.email else None,
                "phoneNumbers": [{"value": params.phone}] if params.phone else None,
                "organizations": [{"name": params.organization}] if params.organization else None,
            }
        )
        data = await google.people().request("POST", "people:createContact", json_data=body)
        return to_json(data)

    @registry.tool("contacts_update", "Update an existing Google Contact", UpdateContactParams)
    async def contacts_update(params: UpdateContactParams) -> str:
        people = google.people()
        existing = await people.request(
            "GET", params.resource_name, params={"personFields": LIST_PERSON_FIELDS}
        )

        names = existing.get("names")
        if params.given_name or params.family_name:
            current = (names or [{}])[0]
            names = [
                drop_none(
                    {
                        "givenName": params.given_name or current.get("givenName"),
                        "familyName": params.family_name or current.get("familyName"),
                    }
                )
            ]

        body = drop_none(
            {
                "etag": existing.get("etag"),
                "names": names,
                "emailAddresses": (
                    [{"value": params.email}] if params.email else existing.get("emailAddresses")
                ),
                "phoneNumbers": (
                    [{"value": params.phone}] if params.phone else existing.get("phoneNumbers")
                ),
            }
        )
        data = await people.request(
            "PATCH",
            f"{params.resource_name}:updateContact",
            params={"updatePersonFields": LIST_PERSON_FIELDS},
            json_data=body,
        )
        return to_json(data)

    @registry.tool("contacts_delete", "Delete a Google Contact", ResourceNameParams)
    async def contacts_delete(params: ResourceNameParams) -> str:
        await google.people().request("DELETE", f"{params.resource_name}:deleteContact")
        return to_json({"success": True, "deleted": params.resource_name})

    @registry.tool("contacts_groups_list", "List contact groups (labels)", NoParams)
    async def contacts_groups_list(params: NoParams) -> str:
        data = await google.people().request("GET", "contactGroups", params={"pageSize": 50})
        return to_json(data.get("contactGroups") or [])
