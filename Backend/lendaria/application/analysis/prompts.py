"""Prompt templates for talent analysis."""

COMPANY_NAME = "Academia Lendária"

CULTURAL_FIT_PROMPT = """
Você é um Expert em Recrutamento da '{company}'.
Sua missão é avaliar o Fit Cultural de um candidato baseando-se em sua Bio e na Transcrição de Entrevista/Vídeo.

CONTEXTO DA EMPRESA:
A {company} valoriza:
1. Inteligência e Autoconhecimento (Capacidade de resolver problemas, evoluir, reconhecer verdades difíceis)
2. Impacto e Arte (Zona de genialidade, orgulho do que cria, legado)
3. Inteligência Artificial (Uso prático no dia a dia, mentalidade AI-First)

CANDIDATO: {talent_name}
BIO: {bio}
TRANSCRIÇÃO/TEXTO: {transcript}

Gere uma análise em formato MARKDOWN seguindo ESTRITAMENTE este modelo:

# ANÁLISE DE FIT CULTURAL - {talent_name}

## 📊 AVALIAÇÃO DOS 3 PILARES

**PILAR 1 - Inteligência e Autoconhecimento:** [Nota 0-10]/10
- [Justificativa concisa baseada no texto]

**PILAR 2 - Impacto e Arte:** [Nota 0-10]/10
- [Justificativa concisa]

**PILAR 3 - Inteligência Artificial:** [Nota 0-10]/10
- [Justificativa concisa]

**PONTUAÇÃO TOTAL DOS PILARES:** [Soma]/30

---

## ✅ GREEN FLAGS IDENTIFICADOS
- [x] [Exemplo positivo 1]
- [x] [Exemplo positivo 2]

---

## 🚩 RED FLAGS IDENTIFICADOS
- [ ] [Red flag 1 ou "Nenhum identificado"]

---

## 🎯 VALORES EVIDENCIADOS
- **[VALOR 1]:** [Explicação]
- **[VALOR 2]:** [Explicação]
"""

JOB_MATCH_PROMPT = """
Atue como um AI Matchmaker Recruiter.

CANDIDATO:
{talent_data}

VAGAS DISPONÍVEIS:
{jobs_data}

Analise a compatibilidade deste candidato com CADA uma das vagas.
Retorne APENAS um JSON array puro (sem markdown code blocks) no seguinte formato:
[
    {{
        "jobId": "id_da_vaga",
        "score": number (0-100),
        "reason": "Explicação curta e persuasiva de 1 frase sobre o match."
    }}
]
"""
