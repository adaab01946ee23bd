"""
Seletores (XPath) das telas do portal de transparência do MPPA.
Manter num arquivo separado facilita manutenção e evita strings soltas:
se o site mudar, basta atualizar esta tabela.
"""

from .constants import CONTRACHEQUES, INDENIZACOES

SELETORES = {
    CONTRACHEQUES: {
        # botão "Contracheque" na página inicial
        "menu": '//*[@id="16"]/div[2]/button',
        "mes": '//*[@id="49"]/div[2]/input',
        "ano": '//*[@id="50"]/div[2]/input',
        "exportar": '//*[@id="34"]/div[1]/div[1]/div',
    },
    INDENIZACOES: {
        # "Verbas Indenizatórias e Outras Remunerações Temporárias"
        "menu": '//*[@id="38"]/div[2]/button',
        "pronto": '//*[@id="111"]/div[1]/div[2]/div',
        "mes": '//*[@id="106"]/div[2]/input',
        "ano": '//*[@id="105"]/div[2]/input',
        "exportar": '//*[@id="111"]/div[1]/div[1]',
    },
}


def seletor(relatorio: str, nome: str) -> str:
    """Devolve o XPath `nome` do `relatorio`, com erro claro se não existir."""
    try:
        return SELETORES[relatorio][nome]
    except KeyError:
        raise KeyError(f"Seletor '{nome}' não definido para '{relatorio}'") from None
