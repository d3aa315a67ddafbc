"""Página HTML de transacciones: muestra el saldo y los botones de depósito y retiro."""

import html
import json

TRANSACTIONS_PAGE = """<html>
  <head>
    <title>Transactions</title>
  </head>
  <body>
    <h1>Transactions</h1>
    <p>Balance: {balance}</p>
    <button onclick="showPopup('deposit')">Deposit</button>
    <button onclick="showPopup('withdraw')">Withdraw</button>

    <div id="deposit-popup" style="display: none">
      <p>Available Balance: {balance}</p>
      <input type="number" id="deposit-amount">
      <button onclick="deposit()">Deposit</button>
    </div>

    <div id="withdraw-popup" style="display: none">
      <p>Available Balance: {balance}</p>
      <input type="number" id="withdraw-amount">
      <button onclick="withdraw()">Withdraw</button>
    </div>

    <script>
      const AUTHORIZATION = {authorization};

      function showPopup(type) {{
        document.getElementById(type + '-popup').style.display = 'block';
      }}

      function submitAmount(type) {{
        const amount = document.getElementById(type + '-amount').value;
        fetch('/' + type, {{
          method: 'POST',
          headers: {{
            'Content-Type': 'application/json',
            'Authorization': AUTHORIZATION
          }},
          body: JSON.stringify({{ amount }})
        }})
        .then(() => {{
          location.reload();
        }});
      }}

      function deposit() {{ submitAmount('deposit'); }}
      function withdraw() {{ submitAmount('withdraw'); }}
    </script>
  </body>
</html>
"""


def render_transactions_page(amount: float, authorization: str) -> str:
    """
    Renderiza la página con el saldo actual.
    La cabecera Authorization del propio usuario se incrusta para que los botones
    puedan llamar a /deposit y /withdraw; se serializa como literal JS seguro.
    """
    # json.dumps no escapa '</', así que se neutraliza para no cerrar el <script>
    auth_literal = json.dumps(authorization).replace("</", "<\\/")
    return TRANSACTIONS_PAGE.format(
        balance=html.escape(f"{amount:.2f}"),
        authorization=auth_literal,
    )
