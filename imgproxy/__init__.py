from flask import Flask
from flask_cors import CORS
from .retrieval.view.proxy_view import bp as proxy_bp


def create_app():
    app = Flask(__name__)
    # 代理接口自己写 Access-Control-Allow-Origin: *，这里只覆盖其余路由，避免重复的头
    CORS(app, resources={r"/health": {"origins": "*"}})

    app.register_blueprint(proxy_bp)
    return app
