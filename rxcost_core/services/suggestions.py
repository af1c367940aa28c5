from __future__ import annotations

import os
from typing import List, Optional, Sequence

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_huggingface import HuggingFaceEndpoint

from rxcost_core.domain.models import Prescription


def generate_cost_suggestions(
    *,
    total_monthly_cost: float,
    annual_cost: float,
    monthly_installment: float,
    affordability_risk: bool,
    prescriptions: Sequence[Prescription] = (),
    disease_type: Optional[str] = None,
) -> List[str]:
    hf_token = os.environ.get("HF_TOKEN")
    model = os.environ.get("HF_MODEL", "mistralai/Mistral-7B-Instruct-v0.2")
    if not hf_token:
        return []

    llm = HuggingFaceEndpoint(
        repo_id=model,
        huggingfacehub_api_token=hf_token,
        temperature=0.4,
        max_new_tokens=200,
    )

    template = """
You are a concise patient cost advisor. Based on the numbers, give 3-5 actionable, specific suggestions to lower prescription spending. Keep each to one short sentence. No emojis.

Data:
- total_monthly_cost: {total_monthly_cost}
- annual_cost: {annual_cost}
- monthly_installment: {monthly_installment}
- affordability_risk: {affordability_risk}
- conditions: {conditions}
- medicines: {medicines}

Guidelines:
- Mention generic or therapeutic alternatives worth asking a healthcare provider about.
- Include one suggestion about pharmacy pricing, mail-order or 90-day supplies.
- Include one about assistance programs or insurance tiers when affordability_risk is True.
- Never give dosing advice. Never restate PII.
Return suggestions as a plain bullet list with no extra text.
"""
    prompt = PromptTemplate.from_template(template)
    chain = prompt | llm | StrOutputParser()
    conditions = sorted({p.disease_type for p in prescriptions} | ({disease_type} if disease_type else set()))
    resp = chain.invoke(
        {
            "total_monthly_cost": round(total_monthly_cost, 2),
            "annual_cost": round(annual_cost, 2),
            "monthly_installment": round(monthly_installment, 2),
            "affordability_risk": affordability_risk,
            "conditions": ", ".join(conditions) or "unspecified",
            "medicines": ", ".join(f"{p.medicine_name} ({p.monthly_cost:.2f}/mo)" for p in prescriptions) or "unspecified",
        }
    )
    return parse_bullets(resp)


def parse_bullets(text: str) -> List[str]:
    # Simple parse: keep lines starting with a dash or bullet
    ideas = []
    for line in text.splitlines():
        t = line.strip()
        if t.startswith(("-", "*", "•")):
            ideas.append(t.lstrip("-*•").strip())
    return [i for i in ideas if i]
