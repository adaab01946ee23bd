from pathlib import Path
from dotenv import load_dotenv
import os

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# URLs
BASE_URL = os.getenv("BASE_URL", "http://transparencia.mppa.mp.br/index.htm")

# Diretórios
OUTPUT_FOLDER = Path(os.getenv("OUTPUT_FOLDER", "/output"))
EVIDENCE_DIR = Path(os.getenv("EVIDENCE_DIR", "evidencias"))

# Tempos (segundos)
GENERAL_TIMEOUT = float(os.getenv("GENERAL_TIMEOUT", "240"))
TIMEOUT_BETWEEN_STEPS = float(os.getenv("TIMEOUT_BETWEEN_STEPS", "5"))
DOWNLOAD_TIMEOUT = float(os.getenv("DOWNLOAD_TIMEOUT", "20"))
ELEMENT_TIMEOUT = float(os.getenv("ELEMENT_TIMEOUT", "30"))

USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36",
)

# Os prefixos têm que ser iguais ao esperado pelo parser do MPPA
PREFIXO_ARQUIVO = "membros-ativos"
CONTRACHEQUES = "contracheques"
INDENIZACOES = "indenizacoes"

# Nomes dos meses como aparecem no portal
MESES = {
    "01": "Janeiro",
    "02": "Fevereiro",
    "03": "Março",
    "04": "Abril",
    "05": "Maio",
    "06": "Junho",
    "07": "Julho",
    "08": "Agosto",
    "09": "Setembro",
    "10": "Outubro",
    "11": "Novembro",
    "12": "Dezembro",
}

# Sufixos de download ainda em andamento (Chrome)
SUFIXOS_PARCIAIS = (".crdownload", ".tmp")
