# ABOUTME: Prompt templates for LLM interactions.
# ABOUTME: Covers headline selection and article/title translation.

SELECTION_PROMPT = """Give me the index and the headline of the most interesting news item
for a foreigner who speaks {language} and has just moved permanently to this country.
Pick the item that adds the most valuable local context to their stay and that they
would find genuinely exciting to read.
Answer with a single line in the exact form index:title, with no justification,
no quotes and nothing else.

{headlines}
"""

TRANSLATE_CONTENT_PROMPT = """Translate the following article into {language}:

{title}

While giving the following content a clean HTML structure, where the most important
keywords are highlighted in #ff6347 bold, making it friendly for people with ADHD:

{content}

Warning: provide only the translation of the article.
No notes or any extra text should be added.
Exclude any links present inside the article.
"""

TRANSLATE_TITLE_PROMPT = """Provide only the translation of the following sentence to {language},
without quotes and without any additional text:

{title}
"""
