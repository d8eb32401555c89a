
SYSTEM_PROMPT = (
    "You are an expert content creator for {site_name}, a digital privacy and security blog. "
    "Your task is to research, write, and format a complete article.\n\n"
    "SITE CONTEXT:\n"
    "- Target audience: Privacy-conscious individuals, security professionals, tech-savvy users\n"
    "- Tone: Informative, practical, empowering (not fear-mongering)\n"
    "- Writing style: Clear, actionable, conversational but professional\n"
    "- Length: 2000-3000 words (10-15 minute read)\n\n"
    "EXISTING ARTICLES (avoid duplicating these topics):\n"
    "{existing_titles}\n\n"
    "TODAY'S DATE: {current_date}"
)

NO_EXISTING_TITLES = "- (none yet)"

RESEARCH_INSTRUCTION = (
    "Using web search, research the latest digital privacy, cybersecurity, or online anonymity news "
    "from the past 7 days. Find trending topics, breaking news, or emerging threats.\n\n"
)

NO_RESEARCH_INSTRUCTION = (
    "Pick a timely digital privacy, cybersecurity, or online anonymity topic that is not "
    "covered by the existing articles.\n\n"
)

USER_PROMPT = (
    "{research_instruction}"
    "Then generate a COMPLETE article as a JSON object with these exact fields:\n\n"
    "{{\n"
    '  "title": "SEO-optimized title (60-70 characters)",\n'
    '  "filename": "url-friendly-filename-without-extension",\n'
    '  "category": "Pick ONE from: {categories}",\n'
    '  "metaDescription": "Compelling meta description (150-160 characters)",\n'
    '  "keywords": "comma, separated, keywords, for, seo",\n'
    '  "readingTime": "X min read",\n'
    '  "emoji": "Single relevant emoji for featured image",\n'
    '  "imageColor": "Hex color (e.g., #6366f1) for placeholder image background",\n'
    '  "summary": "2-sentence summary for article card (150 characters max)",\n'
    '  "content": "FULL HTML CONTENT - see requirements below"\n'
    "}}\n\n"
    "CONTENT REQUIREMENTS:\n"
    "- Start with <p><strong>Introduction:</strong> Hook the reader...</p>\n"
    "- Use proper HTML: <h2>, <h3>, <p>, <ul>, <li>, <strong>\n"
    '- Include 3-5 main <h2> sections with id attributes (e.g., <h2 id="section-name">)\n'
    "- Add 2-3 <h3> subsections within main sections\n"
    "- Include practical examples, tips, or warnings\n"
    "- Add special boxes where appropriate:\n"
    '  * <div class="tip-box"><strong>💡 Pro Tip:</strong> ...</div>\n'
    '  * <div class="warning-box"><strong>⚠️ Warning:</strong> ...</div>\n'
    "- End with strong conclusion\n"
    "- Use **bold** sparingly for emphasis (will convert to <strong>)\n"
    "- NO markdown - output pure HTML tags only\n\n"
    "The content should be unique, well-researched, and provide genuine value."
)

FORMAT_INSTRUCTIONS = (
    "Respond ONLY in valid JSON that strictly matches this format.\n"
    "All keys and strings must be enclosed in double quotes.\n"
    "You MUST include every field exactly as in the example.\n\n"
    "{example}"
)
