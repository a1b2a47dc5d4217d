"""dummy_resume_texts.py
Pasted resume texts to run Magic Import against.
"""

REGRESSION_RESUME_TEXT = "Jane Doe\njane@x.com\n555-123-4567\nSKILLS\nPython, Go | Rust"

FULL_RESUME_TEXT = """John Smith
john.smith@example.com | (555) 987-6543

Summary
Backend engineer with eight years in industry.
- Builds reliable data pipelines

Work Experience
Senior Engineer at Acme Corp
Developer - Globex | Payments team

Education
State University - BSc Computer Science
MIT

Technical Skills
Python, SQL | Docker
Kubernetes  Terraform
Python

Projects
Resume builder
"""

NO_SECTIONS_TEXT = "Just a name\nand some words nobody can classify"

WHITESPACE_TEXTS = ["", " ", "\n\n\t  \n"]
