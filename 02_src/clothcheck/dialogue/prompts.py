"""Spoken phrases used by the dialog engine."""

WELCOME = "ふくチェックへようこそ。"

ASK_POSTAL_CODE = "お住まいの郵便番号の、はじめの3桁を教えてください。"
ASK_POSTAL_CODE_REPROMPT = "郵便番号のはじめの3桁を、1桁ずつ教えてください。"
ASK_POSTAL_CODE_ERROR = "うまく聞き取れませんでした。郵便番号のはじめの3桁を、もう一度教えてください。"

ASK_POSTAL_CODE_REST = "{digits}ですね。続けて、残りの4桁を教えてください。"
ASK_POSTAL_CODE_REST_REPROMPT = "郵便番号の残りの4桁を、1桁ずつ教えてください。"
ASK_POSTAL_CODE_REST_ERROR = "うまく聞き取れませんでした。郵便番号の残りの4桁を、もう一度教えてください。"

POSTAL_CODE_REGISTERED = "郵便番号を{postal_code}で登録しました。"
ASK_RATING = "今の気温は{temperature}度です。あつい、さむい、ちょうどいい、のどれですか。"
ASK_RATING_REPROMPT = "あつい、さむい、ちょうどいい、のどれかで答えてください。"

# Goal responses: temperature, rating label, image note
ALREADY_RATED = "今の気温は{temperature}度です。前回は{label}と記録しています。{image_note}"
RATING_RECORDED = "{temperature}度は{label}、と記録しました。{image_note}"
IMAGE_EXISTS = "LINEに服装の写真を送りました。"
IMAGE_MISSING = "LINEから感想を変更できます。"

RATING_CHOICES = "{temperature}度の時の感想を更新したい場合は下記から選択してください。"

WRONG_PHASE_WANT_REST = "はじめの3桁は受け付けました。残りの4桁を教えてください。"
WRONG_PHASE_WANT_FIRST = "先に、郵便番号のはじめの3桁を教えてください。"

ERROR = "すみません、よくわかりませんでした。"
ERROR_REPROMPT = "もう一度お話しください。"

HELP_POSTAL_CODE = "郵便番号を登録すると、その地域の気温をお知らせします。まず、はじめの3桁を1桁ずつ教えてください。"
HELP_POSTAL_CODE_REST = "郵便番号の残りの4桁を、1桁ずつ教えてください。"
HELP_RATING = "今の気温の感じ方を、あつい、さむい、ちょうどいい、のどれかで教えてください。"
HELP_RATING_REPROMPT = ASK_RATING_REPROMPT
HELP_LAUNCH = "ふくチェックは、気温ごとの感じ方を記録するスキルです。ふくチェックを開いて、と話しかけてください。"

GOODBYE = "またね。"
