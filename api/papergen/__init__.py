"""
Question Paper Generation
api/papergen/

Steps:
1. Validator    : section/question mark totals and topic selection
2. Matcher      : filter and rank bank questions per slot
3. Fallback     : templated question when the bank has no match
4. Assembler    : walk the CIE/SEE structure slot by slot
5. Renderer     : fixed plain-text paper layout
6. Doc Exporter : .docx rendition of the paper
"""
