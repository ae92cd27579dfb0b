"""Prompts for document analysis and artifact generation.

Both prompts demand a bare JSON object. The model still wraps replies in
fences or narrative often enough that every reply goes through
``recover_json_object``.
"""

ANALYSIS_STRUCTURE = """{
  "companyName": "string - the company name",
  "industry": "string - the industry sector",
  "businessContext": "string - detailed business context, operations, size, market position",
  "currentChallenges": "string - key business and technical challenges they're facing",
  "strategicGoals": "string - their strategic goals and objectives for the next 1-3 years",
  "technicalLandscape": "string - current technology systems, platforms, and tools mentioned",
  "constraints": "string - budget constraints, compliance requirements, technical limitations",
  "timeline": "string - any mentioned project timelines or urgency",
  "budget": "string - budget ranges or financial constraints if mentioned",
  "systems": ["array of system objects found in documents, include name, vendor, type (ERP/MES/CRM/PLM/Other), brief notes"],
  "manufacturingProcesses": ["list any manufacturing-specific processes mentioned (e.g., production planning, MES, quality management, shop floor execution)"],
  "explicitCapabilities": ["capabilities explicitly mentioned in the documents or RFPs (e.g., order management, inventory, BOM management, quality control)"],
  "documentSummaries": ["concise per-document one-sentence summary useful for traceability"]
}"""

ANALYSIS_PROMPT = """You are analyzing discovery documents for a Salesforce Enterprise Architecture engagement. Extract the following information from these documents:

IMPORTANT: Your response MUST be ONLY valid JSON. Do not include any markdown formatting, backticks, or explanatory text. Start directly with {{ and end with }}.

Extract and return this exact JSON structure (add additional manufacturing/capability-focused fields to help artifact generation):
{structure}

Rules:
- Extract actual content from the provided extracted texts or attached documents.
- Be comprehensive but concise.
- If information is not found, use empty string "" or empty array [].
- Focus on information relevant to Salesforce implementation and discrete manufacturing capabilities.
- Combine information from all documents provided where appropriate.
- Return ONLY the JSON object, nothing else"""

ARTIFACT_STRUCTURE = """{
  "capabilityMap": {
    "businessDrivers": ["driver1", "driver2", "driver3"],
    "sales": [{"capability": "Lead Management", "description": "desc", "salesforceProducts": ["Sales Cloud"]}],
    "service": [{"capability": "Case Management", "description": "desc", "salesforceProducts": ["Service Cloud"]}],
    "marketing": [{"capability": "Campaign Management", "description": "desc", "salesforceProducts": ["Marketing Cloud"]}],
    "commerce": [{"capability": "Order Management", "description": "desc", "salesforceProducts": ["Commerce Cloud"]}],
    "platformData": [{"capability": "Data Integration", "description": "desc", "salesforceProducts": ["Data Cloud", "MuleSoft"]}],
    "industrySpecific": [{"capability": "Industry Solution", "description": "desc", "salesforceProducts": ["Financial Services Cloud"]}]
  },
  "currentStateArchitecture": {
    "overview": "Current state summary",
    "systemsOfRecord": [{"name": "CRM System", "businessCapability": "Customer Management", "salesforceOpportunity": "Replace with Sales Cloud", "recommendedSalesforceProducts": ["Sales Cloud"]}],
    "systemsOfDifferentiation": [{"name": "Portal", "businessCapability": "Customer Portal", "salesforceOpportunity": "Enhance with Experience Cloud", "recommendedSalesforceProducts": ["Experience Cloud"]}],
    "systemsOfInnovation": [{"name": "AI Bot", "emergingCapability": "Chatbot", "salesforceOpportunity": "Implement Agentforce", "recommendedSalesforceProducts": ["Agentforce"]}]
  },
  "futureStateArchitecture": {
    "overview": "Future vision with Salesforce",
    "platformComponents": {
      "dataUnification": "Data Cloud strategy",
      "integration": "MuleSoft approach",
      "analytics": "Tableau strategy",
      "aiAutomation": "Einstein AI opportunities"
    },
    "systemsOfRecord": [{"name": "Sales Cloud", "futureVision": "Unified CRM", "salesforceProducts": ["Sales Cloud"], "timeline": "Q1 2026", "benefits": ["Benefit 1", "Benefit 2"]}],
    "systemsOfDifferentiation": [],
    "systemsOfInnovation": []
  },
  "prioritizationMatrix": [
    {"initiative": "Sales Cloud Implementation", "businessValue": "High", "effort": "Medium", "roi": "High", "priority": 1, "description": "Deploy Sales Cloud"}
  ],
  "strategicRoadmap": [
    {"phase": "Phase 1: Foundation", "initiatives": ["Deploy Sales Cloud", "Integrate Data"], "outcomes": ["Unified CRM", "Clean data"]}
  ]
}"""

GENERATION_PROMPT = """You are a Salesforce Enterprise Architect creating artifacts for {company_name} in the {industry} industry.

Business Context: {business_context}
Current Challenges: {current_challenges}
Strategic Goals: {strategic_goals}
Technical Landscape: {technical_landscape}
Constraints: {constraints}
Timeline: {timeline}
Budget: {budget}

Generate ONLY valid JSON (no markdown, no explanation) with this EXACT structure:
{structure}

Return ONLY the JSON object, nothing else."""


def build_analysis_prompt() -> str:
    return ANALYSIS_PROMPT.format(structure=ANALYSIS_STRUCTURE)


def build_generation_prompt(discovery) -> str:
    """Fill the generation prompt from a DiscoveryRecord."""
    return GENERATION_PROMPT.format(
        company_name=discovery.company_name or "the client",
        industry=discovery.industry or "unspecified",
        business_context=discovery.business_context,
        current_challenges=discovery.current_challenges,
        strategic_goals=discovery.strategic_goals,
        technical_landscape=discovery.technical_landscape,
        constraints=discovery.constraints,
        timeline=discovery.timeline,
        budget=discovery.budget,
        structure=ARTIFACT_STRUCTURE,
    )
