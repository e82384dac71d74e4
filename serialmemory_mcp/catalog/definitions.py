"""Tool schemas, categories, tool paths and backend routes.

Pure data. The adapter holds no tool logic of its own: every tool listed here
is forwarded to the SerialMemory API, except the meta-tools at the bottom.
"""

from serialmemory_mcp.catalog.models import (
    DESTRUCTIVE,
    READ_ONLY,
    Category,
    HttpVerb,
    Route,
    ToolDescriptor,
)

_EMPTY_SCHEMA = {"type": "object", "properties": {}}

# ═══════════════════════════════════════════════════════════════════════════════
# CORE
# ═══════════════════════════════════════════════════════════════════════════════

CORE_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="memory_search",
        description="Search for relevant memories using semantic search, full-text search, or both. Returns memories with entities and temporal context.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query (natural language)"},
                "mode": {"type": "string", "enum": ["semantic", "text", "hybrid"], "default": "hybrid", "description": "Search mode"},
                "limit": {"type": "integer", "default": 10, "description": "Maximum results to return"},
                "threshold": {"type": "number", "default": 0.7, "description": "Minimum similarity threshold (0.0-1.0)"},
                "include_entities": {"type": "boolean", "default": True, "description": "Include linked entities"},
            },
            "required": ["query"],
        },
    ),
    ToolDescriptor(
        name="memory_ingest",
        description="Add a new memory (episode) to the knowledge graph. Automatically extracts entities, relationships, and generates embeddings.",
        input_schema={
            "type": "object",
            "properties": {
                "content": {"type": "string", "description": "Memory content to store"},
                "source": {"type": "string", "description": "Source of the memory (e.g., 'claude-desktop', 'cursor')"},
                "metadata": {"type": "object", "description": "Additional metadata (tags, importance, etc.)"},
                "extract_entities": {"type": "boolean", "default": True, "description": "Whether to extract entities and relationships"},
                "dedup_mode": {
                    "type": "string",
                    "enum": ["warn", "skip", "append", "off"],
                    "default": "warn",
                    "description": "Dedup mode: warn (create+report), skip (reject if dup), append (merge into existing), off (no check)",
                },
                "dedup_threshold": {"type": "number", "default": 0.85, "description": "Similarity threshold for duplicate detection (0.0-1.0)"},
            },
            "required": ["content"],
        },
    ),
    ToolDescriptor(
        name="memory_about_user",
        description="Retrieve structured information about the user's persona, preferences, skills, goals, and background.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "user_id": {"type": "string", "default": "default_user", "description": "User identifier"},
            },
        },
    ),
    ToolDescriptor(
        name="initialise_conversation_session",
        description="Create a new conversation session to track context across interactions.",
        input_schema={
            "type": "object",
            "properties": {
                "session_name": {"type": "string", "description": "Optional session name/title"},
                "client_type": {"type": "string", "description": "Client type (e.g., 'claude-desktop', 'cursor')"},
                "metadata": {"type": "object", "description": "Additional session metadata"},
            },
        },
    ),
    ToolDescriptor(
        name="end_conversation_session",
        description="End the current conversation session.",
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDescriptor(
        name="instantiate_context",
        description="Retrieve and summarize memories from the previous day(s) to continue where you left off. Use at the start of a new session to get context from prior work. Optionally filter by project or subject for relevant context only.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "project_or_subject": {
                    "type": "string",
                    "description": "Optional project name or subject to filter memories (e.g., 'FlexPilot', 'waterfall rendering'). Uses semantic search to find relevant memories.",
                },
                "days_back": {"type": "integer", "default": 3, "description": "Number of days to look back (default: 3)"},
                "limit": {"type": "integer", "default": 50, "description": "Maximum memories to retrieve"},
                "include_entities": {"type": "boolean", "default": True, "description": "Include linked entities and relationships"},
            },
        },
    ),
    ToolDescriptor(
        name="memory_multi_hop_search",
        description="Perform multi-hop reasoning by traversing the knowledge graph. Finds initial memories, then follows entity relationships.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Initial search query"},
                "hops": {"type": "integer", "default": 2, "description": "Number of relationship hops to traverse"},
                "max_results_per_hop": {"type": "integer", "default": 5, "description": "Maximum results per hop"},
            },
            "required": ["query"],
        },
    ),
    ToolDescriptor(
        name="get_integrations",
        description="List available integrations (external tools/APIs).",
        annotations=READ_ONLY,
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDescriptor(
        name="import_from_core",
        description="Import entities, relations, and observations from CORE MCP export format. Provide JSON with 'entities' array (each with name, entityType, observations[]) and 'relations' array (each with from, to, relationType).",
        input_schema={
            "type": "object",
            "properties": {
                "data": {
                    "type": "object",
                    "description": "CORE export data with 'entities' and 'relations' arrays",
                    "properties": {
                        "entities": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "name": {"type": "string"},
                                    "entityType": {"type": "string"},
                                    "observations": {"type": "array", "items": {"type": "string"}},
                                },
                                "required": ["name"],
                            },
                        },
                        "relations": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "from": {"type": "string"},
                                    "to": {"type": "string"},
                                    "relationType": {"type": "string"},
                                },
                                "required": ["from", "to", "relationType"],
                            },
                        },
                    },
                },
                "source": {"type": "string", "default": "core-import", "description": "Source identifier for imported data"},
            },
            "required": ["data"],
        },
    ),
    ToolDescriptor(
        name="set_user_persona",
        description="Set or update a user persona attribute (preference, skill, goal, background).",
        input_schema={
            "type": "object",
            "properties": {
                "attribute_type": {"type": "string", "description": "Type: preference, skill, goal, background"},
                "attribute_key": {"type": "string", "description": "Attribute name (e.g., 'programming_language')"},
                "attribute_value": {"type": "string", "description": "Attribute value"},
                "confidence": {"type": "number", "default": 1.0, "description": "Confidence score (0.0-1.0)"},
                "user_id": {"type": "string", "default": "default_user", "description": "User identifier"},
            },
            "required": ["attribute_type", "attribute_key", "attribute_value"],
        },
    ),
    ToolDescriptor(
        name="crawl_relationships",
        description="Crawl existing memories to extract entities and relationships. Useful for populating the knowledge graph from memories that were ingested without entity extraction.",
        input_schema={
            "type": "object",
            "properties": {
                "batch_size": {"type": "integer", "default": 100, "description": "Number of memories to process"},
                "force_reprocess": {"type": "boolean", "default": False, "description": "Reprocess memories that already have entities"},
            },
        },
    ),
    ToolDescriptor(
        name="get_graph_statistics",
        description="Get statistics about the knowledge graph including entity and relationship counts by type.",
        annotations=READ_ONLY,
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDescriptor(
        name="get_model_info",
        description="Get information about the current embedding model (name, dimensions, supported models, export instructions).",
        annotations=READ_ONLY,
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDescriptor(
        name="reembed_memories",
        description="Re-generate embeddings for memories. Use after switching to a different embedding model. By default only re-embeds memories with null embeddings.",
        input_schema={
            "type": "object",
            "properties": {
                "force_all": {"type": "boolean", "default": False, "description": "Re-embed ALL memories, not just those with null embeddings"},
                "batch_size": {"type": "integer", "default": 100, "description": "Number of memories to process"},
            },
        },
    ),
)

# Core tools still listed in lazy mode; everything else is reached by category.
LAZY_CORE_TOOL_NAMES = frozenset({
    "memory_search",
    "memory_ingest",
    "memory_multi_hop_search",
    "memory_about_user",
})

# ═══════════════════════════════════════════════════════════════════════════════
# LIFECYCLE
# ═══════════════════════════════════════════════════════════════════════════════

LIFECYCLE_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="memory_update",
        description="Update memory content with new embedding. Creates MemoryUpdated event. Does not mutate original - creates new version.",
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to update"},
                "new_content": {"type": "string", "description": "New content to replace existing"},
                "reason": {"type": "string", "description": "Reason for update (audit trail)"},
                "actor_id": {"type": "string", "description": "ID of actor making the update"},
            },
            "required": ["memory_id", "new_content"],
        },
    ),
    ToolDescriptor(
        name="memory_delete",
        description="Soft delete (invalidate) a memory. No hard deletes - memory remains for audit. Creates MemoryInvalidated event.",
        annotations=DESTRUCTIVE,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to soft delete"},
                "reason": {"type": "string", "description": "Reason for deletion (required for audit)"},
                "superseded_by_id": {"type": "string", "description": "UUID of memory that supersedes this one"},
                "actor_id": {"type": "string", "description": "ID of actor making the deletion"},
            },
            "required": ["memory_id", "reason"],
        },
    ),
    ToolDescriptor(
        name="memory_merge",
        description="Merge multiple memories into a single new memory. Source memories are soft deleted. Creates new memory with causal parents.",
        input_schema={
            "type": "object",
            "properties": {
                "source_memory_ids": {"type": "array", "items": {"type": "string"}, "description": "UUIDs of memories to merge (min 2)"},
                "merged_content": {"type": "string", "description": "Combined content for new memory"},
                "strategy": {"type": "string", "description": "Merge strategy (e.g., 'concatenate', 'summarize', 'manual')"},
                "actor_id": {"type": "string", "description": "ID of actor performing merge"},
            },
            "required": ["source_memory_ids", "merged_content"],
        },
    ),
    ToolDescriptor(
        name="memory_split",
        description="Split a memory into multiple child memories. Parent is marked as split (inactive). Children reference parent as causal parent.",
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to split"},
                "child_contents": {"type": "array", "items": {"type": "string"}, "description": "Content for each child memory (min 2)"},
                "strategy": {"type": "string", "description": "Split strategy (e.g., 'semantic', 'temporal', 'manual')"},
                "reason": {"type": "string", "description": "Reason for split"},
                "actor_id": {"type": "string", "description": "ID of actor performing split"},
            },
            "required": ["memory_id", "child_contents"],
        },
    ),
    ToolDescriptor(
        name="memory_decay",
        description="Apply time-based confidence decay to a memory using exponential decay formula: confidence * 0.5^(days/half_life).",
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to decay"},
                "actor_id": {"type": "string", "description": "ID of actor/system applying decay"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_reinforce",
        description="Reinforce a memory - reset decay timer and optionally boost confidence. Use when memory is validated or frequently accessed.",
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to reinforce"},
                "confidence": {"type": "number", "default": 1.0, "description": "New confidence score (0.0-1.0)"},
                "source": {"type": "string", "default": "manual", "description": "Source of reinforcement (e.g., 'user_validation', 'frequent_access')"},
                "validated_by_ids": {"type": "array", "items": {"type": "string"}, "description": "UUIDs of validating memories"},
                "actor_id": {"type": "string", "description": "ID of actor performing reinforcement"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_expire",
        description="Expire a memory based on TTL policy. Different from decay - this is a hard cutoff. Memory becomes inactive.",
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to expire"},
                "policy": {"type": "string", "default": "manual", "description": "Expiration policy name"},
                "ttl_days": {"type": "integer", "description": "Original TTL in days (for audit)"},
                "actor_id": {"type": "string", "description": "ID of actor/system expiring memory"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_supersede",
        description="Replace a memory with new content. Creates new memory, invalidates old, links via causal_parents and superseded_by.",
        input_schema={
            "type": "object",
            "properties": {
                "old_memory_id": {"type": "string", "description": "UUID of memory to supersede"},
                "new_content": {"type": "string", "description": "New replacement content"},
                "reason": {"type": "string", "description": "Why superseding"},
                "extract_entities": {"type": "boolean", "default": True, "description": "Extract entities from new content"},
                "actor_id": {"type": "string", "description": "Actor ID"},
            },
            "required": ["old_memory_id", "new_content"],
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# OBSERVABILITY
# ═══════════════════════════════════════════════════════════════════════════════

OBSERVABILITY_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="memory_trace",
        description="Get complete event history for a memory. Shows all mutations in chronological order.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to trace"},
                "include_payloads": {"type": "boolean", "default": False, "description": "Include full event payloads"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_lineage",
        description="Trace causal ancestry and descendants of a memory through causal_parents relationships.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to trace lineage"},
                "max_depth": {"type": "integer", "default": 5, "description": "Maximum depth to traverse (1-10)"},
                "direction": {"type": "string", "enum": ["ancestors", "descendants", "both"], "default": "ancestors", "description": "Direction to trace"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_explain",
        description="Explain current state of a memory - why it's active/inactive, confidence calculations, relationships, and recommendations.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to explain"},
            },
            "required": ["memory_id"],
        },
    ),
    ToolDescriptor(
        name="memory_conflicts",
        description="Find all conflicts/contradictions involving a memory or list all unresolved conflicts.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID of memory to check (optional - if omitted, returns all unresolved)"},
                "limit": {"type": "integer", "default": 50, "description": "Maximum conflicts to return"},
            },
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# SAFETY
# ═══════════════════════════════════════════════════════════════════════════════

SAFETY_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="detect_contradictions",
        description="Find memories that contradict each other using semantic similarity and content analysis.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID to check for contradictions (optional - if omitted, batch scan)"},
                "similarity_threshold": {"type": "number", "default": 0.85, "description": "Minimum similarity to consider (0.5-0.99)"},
                "limit": {"type": "integer", "default": 20, "description": "Maximum contradictions to return"},
                "auto_flag": {"type": "boolean", "default": False, "description": "Automatically flag detected contradictions in database"},
            },
        },
    ),
    ToolDescriptor(
        name="detect_hallucinations",
        description="Flag potential hallucinations based on confidence, validation status, access patterns, and isolation.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID to check (optional - if omitted, batch scan)"},
                "confidence_threshold": {"type": "number", "default": 0.3, "description": "Flag memories below this confidence"},
                "limit": {"type": "integer", "default": 20, "description": "Maximum results to return"},
                "auto_flag": {"type": "boolean", "default": False, "description": "Automatically flag in database"},
            },
        },
    ),
    ToolDescriptor(
        name="verify_memory_integrity",
        description="Verify content hash integrity for memories. Detects content corruption.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "UUID to verify (optional - if omitted, batch verify)"},
                "limit": {"type": "integer", "default": 100, "description": "Maximum memories to check"},
                "fix_corrupted": {"type": "boolean", "default": False, "description": "Automatically recompute hashes for corrupted entries"},
            },
        },
    ),
    ToolDescriptor(
        name="scan_loops",
        description="Detect cycles in causal parent relationships (loop detection). Cycles can cause infinite recursion.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "max_depth": {"type": "integer", "default": 10, "description": "Maximum depth to search (1-20)"},
                "limit": {"type": "integer", "default": 50, "description": "Maximum loops to return"},
            },
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# EXPORT
# ═══════════════════════════════════════════════════════════════════════════════

EXPORT_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="export_workspace",
        description="Export entire workspace - memories, entities, relationships, and optionally events. Supports encryption and compression.",
        input_schema={
            "type": "object",
            "properties": {
                "output_path": {"type": "string", "description": "Output file path (default: workspace_export_YYYYMMDD.json)"},
                "include_events": {"type": "boolean", "default": False, "description": "Include raw event store data"},
                "active_only": {"type": "boolean", "default": True, "description": "Only export active memories"},
                "encrypt": {"type": "boolean", "default": False, "description": "AES-256 encrypt the export"},
                "encryption_key": {"type": "string", "description": "Encryption key (required if encrypt=true)"},
                "compress": {"type": "boolean", "default": False, "description": "GZip compress the export"},
            },
        },
    ),
    ToolDescriptor(
        name="export_memories",
        description="Export memories with filters. Supports JSON and CSV formats.",
        input_schema={
            "type": "object",
            "properties": {
                "output_path": {"type": "string", "description": "Output file path"},
                "layer": {
                    "type": "string",
                    "enum": ["L0_RAW", "L1_CONTEXT", "L2_SUMMARY", "L3_KNOWLEDGE", "L4_HEURISTIC"],
                    "description": "Filter by layer",
                },
                "min_confidence": {"type": "number", "description": "Minimum confidence filter (0.0-1.0)"},
                "from_date": {"type": "string", "description": "Start date filter (ISO 8601)"},
                "to_date": {"type": "string", "description": "End date filter (ISO 8601)"},
                "limit": {"type": "integer", "default": 10000, "description": "Maximum memories to export"},
                "format": {"type": "string", "enum": ["json", "csv"], "default": "json", "description": "Output format"},
            },
        },
    ),
    ToolDescriptor(
        name="export_graph",
        description="Export knowledge graph (entities and relationships). Supports JSON, GraphML, and Cytoscape formats.",
        input_schema={
            "type": "object",
            "properties": {
                "output_path": {"type": "string", "description": "Output file path"},
                "format": {"type": "string", "enum": ["json", "graphml", "cytoscape"], "default": "json", "description": "Output format"},
                "include_isolated": {"type": "boolean", "default": False, "description": "Include entities with no relationships"},
            },
        },
    ),
    ToolDescriptor(
        name="export_user_profile",
        description="Export user persona attributes and memory statistics.",
        input_schema={
            "type": "object",
            "properties": {
                "user_id": {"type": "string", "default": "default_user", "description": "User ID to export"},
                "output_path": {"type": "string", "description": "Output file path"},
                "include_interactions": {"type": "boolean", "default": False, "description": "Include interaction history"},
            },
        },
    ),
    ToolDescriptor(
        name="export_markdown",
        description="Export as Obsidian-compatible Markdown vault with wikilinks, YAML frontmatter, and folder organization.",
        input_schema={
            "type": "object",
            "properties": {
                "output_path": {"type": "string", "description": "Output directory (default: serial_memory_vault)"},
                "active_only": {"type": "boolean", "default": True, "description": "Only export active memories"},
                "include_entities": {"type": "boolean", "default": True, "description": "Include entity pages"},
                "include_sessions": {"type": "boolean", "default": True, "description": "Include session summaries"},
                "min_confidence": {"type": "number", "default": 0.0, "description": "Minimum confidence filter (0.0-1.0)"},
                "group_by": {"type": "string", "enum": ["month", "layer", "source"], "default": "month", "description": "How to group memory files"},
            },
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# REASONING
# ═══════════════════════════════════════════════════════════════════════════════

REASONING_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="engineering_analyze",
        description="Analyze the knowledge graph for engineering insights. Detects power integrity issues (voltage mismatch, overcurrent), signal integrity issues (clock/protocol mismatch), dependency corruption (cascading failures), and thermal risks.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "Optional: analyze entities related to this memory"},
                "project": {"type": "string", "description": "Optional: filter analysis to entities connected to this project name"},
            },
        },
    ),
    ToolDescriptor(
        name="engineering_visualize",
        description="Generate graph visualization data with nodes, links, and reasoning overlays. Returns JSON suitable for react-force-graph-3d rendering.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "Optional: visualize entities related to this memory"},
                "project": {"type": "string", "description": "Optional: filter to entities connected to this project name"},
                "mode": {"type": "string", "enum": ["software", "hardware", "mixed"], "default": "mixed", "description": "Visualization mode filter"},
                "include_overlays": {"type": "boolean", "default": True, "description": "Include reasoning-based risk/warning overlays"},
            },
        },
    ),
    ToolDescriptor(
        name="engineering_reason",
        description="Run multi-model reasoning on the knowledge graph. Executes multiple reasoning models in parallel (Structural, Risk, Optimization, Contradiction) and merges results by confidence and agreement. Returns traced insights with source model attribution.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "memory_id": {"type": "string", "description": "Optional: reason over entities related to this memory"},
                "project": {"type": "string", "description": "Optional: filter reasoning to entities connected to this project name"},
                "max_duration_ms": {"type": "integer", "default": 30000, "description": "Maximum reasoning time in milliseconds (default: 30000)"},
            },
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# WORKSPACE & SNAPSHOTS
# ═══════════════════════════════════════════════════════════════════════════════

WORKSPACE_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="workspace_create",
        description="Create a new workspace for scoping memories and sessions.",
        input_schema={
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Workspace slug identifier (e.g., 'my-project')"},
                "display_name": {"type": "string", "description": "Human-readable display name"},
                "description": {"type": "string", "description": "Workspace description"},
            },
            "required": ["name"],
        },
    ),
    ToolDescriptor(
        name="workspace_list",
        description="List all workspaces for the current tenant.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "limit": {"type": "integer", "default": 50, "description": "Maximum workspaces to return"},
            },
        },
    ),
    ToolDescriptor(
        name="workspace_switch",
        description="Switch the active workspace for this MCP session. All subsequent operations will be scoped to the new workspace.",
        input_schema={
            "type": "object",
            "properties": {
                "workspace_id": {"type": "string", "description": "Workspace slug to switch to"},
            },
            "required": ["workspace_id"],
        },
    ),
    ToolDescriptor(
        name="snapshot_create",
        description="Create a named state snapshot of the current workspace. Captures recent memories, active entities, session state, and custom metadata.",
        input_schema={
            "type": "object",
            "properties": {
                "snapshot_name": {"type": "string", "description": "Unique name for this snapshot (e.g., 'checkpoint-1')"},
                "goal": {"type": "string", "description": "Current goal to capture"},
                "constraints": {"type": "string", "description": "Current constraints to capture"},
                "memory": {"type": "string", "description": "Conversation essence to capture"},
                "metadata": {"type": "object", "description": "Custom metadata to include"},
            },
            "required": ["snapshot_name"],
        },
    ),
    ToolDescriptor(
        name="snapshot_list",
        description="List snapshots for a workspace.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "workspace_id": {"type": "string", "description": "Workspace to list snapshots for (defaults to current)"},
                "limit": {"type": "integer", "default": 20, "description": "Maximum snapshots to return"},
            },
        },
    ),
    ToolDescriptor(
        name="snapshot_load",
        description="Load a named snapshot and return its captured state data for context restoration.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "snapshot_name": {"type": "string", "description": "Name of the snapshot to load"},
                "workspace_id": {"type": "string", "description": "Workspace to load from (defaults to current)"},
            },
            "required": ["snapshot_name"],
        },
    ),
)

ALL_TOOLS: tuple[ToolDescriptor, ...] = (
    *CORE_TOOLS,
    *LIFECYCLE_TOOLS,
    *OBSERVABILITY_TOOLS,
    *SAFETY_TOOLS,
    *EXPORT_TOOLS,
    *REASONING_TOOLS,
    *WORKSPACE_TOOLS,
)

# ═══════════════════════════════════════════════════════════════════════════════
# META-TOOLS (answered in-process)
# ═══════════════════════════════════════════════════════════════════════════════

META_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_tools_in_category",
        description="Browse available SerialMemory tools by category. Call with no path for root categories. Categories: lifecycle, observability, safety, export, reasoning, session, admin, workspace.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Category path (empty for root, e.g. 'lifecycle', 'safety')"},
            },
        },
    ),
    ToolDescriptor(
        name="execute_tool",
        description="Execute a SerialMemory tool by its category path. Use get_tools_in_category first to discover tools and their parameters.",
        input_schema={
            "type": "object",
            "properties": {
                "tool_path": {"type": "string", "description": "Tool path (e.g. 'lifecycle.memory_update', 'safety.detect_contradictions')"},
                "arguments": {"type": "object", "description": "Tool arguments as JSON object"},
            },
            "required": ["tool_path"],
        },
    ),
)

# Older gateway pair. Dispatchable, never listed.
GATEWAY_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_tools",
        description="Discover available SerialMemory tools by category. Returns tool schemas and descriptions. Categories: lifecycle, observability, safety, export, reasoning, admin, session, workspace.",
        annotations=READ_ONLY,
        input_schema={
            "type": "object",
            "properties": {
                "category": {"type": "string", "description": "Filter by category (omit for category listing)"},
            },
        },
    ),
    ToolDescriptor(
        name="use_tool",
        description="Execute a SerialMemory tool by name. Use get_tools first to discover available tools and their parameters.",
        input_schema={
            "type": "object",
            "properties": {
                "tool_name": {"type": "string", "description": "Name of the tool to execute"},
                "arguments": {"type": "object", "description": "Tool arguments"},
                "context": {
                    "type": "object",
                    "description": "Optional per-call context envelope",
                    "properties": {
                        "workspace_id": {"type": "string", "description": "Override workspace for this call"},
                        "session_id": {"type": "string", "description": "Override session for this call"},
                        "memory": {"type": "string", "description": "1-3 sentence conversation essence"},
                        "goal": {"type": "string", "description": "Current objective"},
                        "constraints": {"type": "string", "description": "Rules or limits"},
                    },
                },
            },
            "required": ["tool_name"],
        },
    ),
)

# ═══════════════════════════════════════════════════════════════════════════════
# CATEGORIES & TOOL PATHS
# ═══════════════════════════════════════════════════════════════════════════════

CATEGORIES: tuple[Category, ...] = (
    Category("lifecycle", "Memory Lifecycle", "Update, delete, merge, split, decay, reinforce, expire, supersede memories"),
    Category("observability", "Observability", "Trace event history, lineage, explain state, find conflicts"),
    Category("safety", "Safety & Integrity", "Detect contradictions, hallucinations, verify hashes, scan loops"),
    Category("export", "Export", "Export workspace, memories, graph, user profile, markdown vault"),
    Category("reasoning", "Engineering Reasoning", "Analyze graphs, visualize, multi-model reasoning"),
    Category("session", "Session Management", "Create/end sessions, instantiate context"),
    Category("admin", "Administration", "Persona, integrations, import, crawl, statistics, model info, reembed"),
    Category("workspace", "Workspace & Snapshots", "Create/switch workspaces, create/load state snapshots"),
)


def _paths(category: str, *tools: str) -> dict[str, str]:
    return {f"{category}.{tool}": tool for tool in tools}


# category.tool_name -> tool name
TOOL_PATHS: dict[str, str] = {
    **_paths("lifecycle", "memory_update", "memory_delete", "memory_merge", "memory_split",
             "memory_decay", "memory_reinforce", "memory_expire", "memory_supersede"),
    **_paths("observability", "memory_trace", "memory_lineage", "memory_explain", "memory_conflicts"),
    **_paths("safety", "detect_contradictions", "detect_hallucinations",
             "verify_memory_integrity", "scan_loops"),
    **_paths("export", "export_workspace", "export_memories", "export_graph",
             "export_user_profile", "export_markdown"),
    **_paths("reasoning", "engineering_analyze", "engineering_visualize", "engineering_reason"),
    **_paths("session", "initialise_conversation_session", "end_conversation_session",
             "instantiate_context"),
    **_paths("admin", "set_user_persona", "get_integrations", "import_from_core",
             "crawl_relationships", "get_graph_statistics", "get_model_info", "reembed_memories"),
    **_paths("workspace", "workspace_create", "workspace_list", "workspace_switch",
             "snapshot_create", "snapshot_list", "snapshot_load"),
}

# ═══════════════════════════════════════════════════════════════════════════════
# ROUTES (relative to {endpoint}/api/)
# ═══════════════════════════════════════════════════════════════════════════════

GET = HttpVerb.GET
POST = HttpVerb.POST

ROUTES: dict[str, Route] = {
    # Core
    "memory_search": Route("memories/search", GET),
    "memory_ingest": Route("memories", POST),
    "memory_about_user": Route("persona", GET),
    "initialise_conversation_session": Route("sessions", POST),
    "end_conversation_session": Route("sessions/current/end", POST),
    "instantiate_context": Route("context/instantiate", GET),
    "memory_multi_hop_search": Route("memories/multi-hop", GET),
    "get_integrations": Route("integrations", GET),
    "import_from_core": Route("import/core", POST),
    "set_user_persona": Route("persona", POST),
    "crawl_relationships": Route("relationships/discover", POST),
    "get_graph_statistics": Route("stats", GET),
    "get_model_info": Route("llm/config", GET),
    "reembed_memories": Route("jobs/reembed", POST),
    # Lifecycle
    "memory_update": Route("power/memory/update", POST),
    "memory_delete": Route("power/memory/delete", POST),
    "memory_merge": Route("power/memory/merge", POST),
    "memory_split": Route("power/memory/split", POST),
    "memory_decay": Route("jobs/decay", POST),
    "memory_reinforce": Route("power/memory/reinforce", POST),
    "memory_expire": Route("power/memory/expire", POST),
    "memory_supersede": Route("power/memory/supersede", POST),
    # Observability
    "memory_trace": Route("power/trace", GET),
    "memory_lineage": Route("power/lineage", GET),
    "memory_explain": Route("power/explain", GET),
    "memory_conflicts": Route("power/conflicts", GET),
    # Safety
    "detect_contradictions": Route("mind/contradictions", GET),
    "detect_hallucinations": Route("mind/hallucinations", GET),
    "verify_memory_integrity": Route("integrity/verify-all", POST),
    "scan_loops": Route("integrity/scan-loops", GET),
    # Export
    "export_workspace": Route("export/workspace", POST),
    "export_memories": Route("export/memories", POST),
    "export_graph": Route("export/graph", POST),
    "export_user_profile": Route("export/user-profile", POST),
    "export_markdown": Route("export/markdown", POST),
    # Reasoning
    "engineering_analyze": Route("reasoning/run", POST),
    "engineering_visualize": Route("visualize/graph", GET),
    "engineering_reason": Route("reasoning/start", POST),
    # Workspace & snapshots
    "workspace_create": Route("workspaces", POST),
    "workspace_list": Route("workspaces", GET),
    "workspace_switch": Route("workspaces/switch", POST),
    "snapshot_create": Route("snapshots", POST),
    "snapshot_list": Route("snapshots", GET),
    "snapshot_load": Route("snapshots/load", GET),
}

# resources/read has no tool of its own
RESOURCES_READ_ROUTE = Route("resources/read", POST)
