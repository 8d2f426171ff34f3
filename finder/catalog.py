# =============================================================================
# finder/catalog.py  —  Tool Catalog
# =============================================================================
#
# The static descriptor of the tool this server advertises.  It is built once at
# import time and never changes; its handler hands it to the registry, and the
# protocol layer advertises it verbatim for every "list tools" request.
#
# The description is what the host's model reads to decide WHEN to call the
# tool, and the schema tells it WHAT to pass.
# =============================================================================

from finder.models import DEFAULT_MAX_RESULTS, MAX_RESULTS_CAP, ToolDescriptor

SEARCH_LEARNING_RESOURCES = "search_learning_resources"


SEARCH_LEARNING_RESOURCES_TOOL = ToolDescriptor(
    name=SEARCH_LEARNING_RESOURCES,
    description="Search for learning resources (videos and articles) on any topic",
    input_schema={
        "type": "object",
        "properties": {
            "topic": {
                "type": "string",
                "description": "The topic to search for (e.g., 'React hooks', 'Python basics')",
            },
            "maxResults": {
                "type": "number",
                "description": f"Maximum number of results per source (default: {DEFAULT_MAX_RESULTS})",
                "default": DEFAULT_MAX_RESULTS,
                "minimum": 1,
                "maximum": MAX_RESULTS_CAP,
            },
        },
        "required": ["topic"],
    },
)
