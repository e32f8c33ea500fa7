"""
Default email template library

Static HTML with {{token}} placeholders and {{#each items}} ... {{/each}}
loops. Rendering and sending happen outside this service; templates are
only stored and copied into a store's email settings.
"""
import re
from typing import Dict, List

PLACEHOLDER_RE = re.compile(r"{{\s*(#each\s+|[#/])?\s*([\w.]+)[^}]*}}")

# Block helpers and loop-scoped names that are not template variables
_NON_VARIABLES = {"each", "if", "unless", "else", "this"}

EMAIL_STYLES = """
  <style>
    body { font-family: -apple-system, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; color: #1f2937; }
    .email-wrapper { width: 100%; background-color: #f5f5f5; }
    .email-container { max-width: 600px; margin: 0 auto; background: #ffffff; border-radius: 8px; overflow: hidden; }
    .email-header { background: #111827; padding: 32px; text-align: center; }
    .email-body { padding: 32px; line-height: 1.6; }
    .email-footer { padding: 24px 32px; background: #f9fafb; text-align: center; }
    .order-box { background: #f9fafb; border: 1px solid #e5e7eb; border-radius: 8px; padding: 16px; margin: 16px 0; }
    .item-row { display: flex; justify-content: space-between; padding: 12px 0; border-bottom: 1px solid #e5e7eb; }
    .btn { display: inline-block; padding: 14px 28px; background: #111827; color: #ffffff !important;
           text-decoration: none; border-radius: 6px; font-weight: 600; }
    .btn-secondary { background: #6b7280; }
    .alert { padding: 14px 16px; border-radius: 6px; margin: 16px 0; }
    .alert-success { background: #ecfdf5; color: #065f46; }
    .alert-info { background: #eff6ff; color: #1e40af; }
    .alert-warning { background: #fffbeb; color: #92400e; }
    .text-muted { color: #6b7280; }
    .text-center { text-align: center; }
    @media only screen and (max-width: 600px) {
      .email-body { padding: 20px; }
      .btn { padding: 12px 24px; font-size: 14px; }
    }
  </style>
"""

FOOTER = """
      <div class="email-footer">
        <p class="text-muted">
          Questions? Contact us at <a href="mailto:{{store_email}}">{{store_email}}</a>
        </p>
        <p class="text-muted" style="font-size: 12px;">
          &copy; {{current_year}} {{store_name}}. All rights reserved.<br>
          {{store_address}}
        </p>
      </div>
"""

ITEMS_BLOCK = """
        {{#each items}}
        <div class="item-row">
          <div><strong>{{name}}</strong><br><span class="text-muted">SKU: {{sku}} | Qty: {{quantity}}</span></div>
          <div><strong>{{price}}</strong></div>
        </div>
        {{/each}}
"""


def wrap_email_content(content: str) -> str:
    """Wrap a template body in the shared document and stylesheet"""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  {EMAIL_STYLES}
</head>
<body style="margin: 0; padding: 20px 0; background-color: #f5f5f5;">
  <div class="email-wrapper">
    <div class="email-container">
      {content}
    </div>
  </div>
</body>
</html>
"""


def _header(title: str, subtitle: str = "") -> str:
    sub = f'<p style="color: rgba(255,255,255,0.85); margin: 10px 0 0;">{subtitle}</p>' if subtitle else ""
    return f"""
      <div class="email-header">
        <h1 style="color: #ffffff; margin: 0;">{title}</h1>
        {sub}
      </div>
"""


def _template(name: str, subject: str, header: str, body: str, text: str) -> Dict[str, str]:
    return {
        "name": name,
        "subject": subject,
        "htmlContent": wrap_email_content(f'{header}\n      <div class="email-body">{body}      </div>\n{FOOTER}'),
        "textContent": text,
    }


DEFAULT_TEMPLATES: Dict[str, Dict[str, str]] = {
    "order_confirmation": _template(
        "Order Confirmation",
        "Order Confirmed! #{{order_number}}",
        _header("Order Confirmed!", "Thank you for your purchase, {{customer_name}}"),
        """
        <div class="alert alert-success">We've received your order and are getting it ready.</div>
        <div class="order-box">
          <p><strong>Order Number:</strong> #{{order_number}}</p>
          <p><strong>Order Date:</strong> {{order_date}}</p>
          <p><strong>Payment Method:</strong> {{payment_method}}</p>
        </div>
        <h2>Order Items</h2>
""" + ITEMS_BLOCK + """
        <div class="order-box">
          <p><strong>Subtotal:</strong> {{subtotal}}</p>
          <p><strong>Shipping:</strong> {{shipping_cost}}</p>
          <p><strong>Tax:</strong> {{tax}}</p>
          <p><strong>Total:</strong> {{order_total}}</p>
        </div>
        <h3>Shipping Address</h3>
        <div class="order-box">{{shipping_address}}</div>
        <div class="text-center"><a href="{{order_url}}" class="btn">Track Your Order</a></div>
""",
        "Hi {{customer_name}}, your order #{{order_number}} is confirmed. Total: {{order_total}}.",
    ),
    "order_shipped": _template(
        "Order Shipped",
        "Your order is on its way! #{{order_number}}",
        _header("Shipped!", "Order #{{order_number}} has left our warehouse"),
        """
        <p>Hi {{customer_name}}, good news: your order is on its way.</p>
        <div class="order-box">
          <p><strong>Carrier:</strong> {{carrier}}</p>
          <p><strong>Tracking Number:</strong> {{tracking_number}}</p>
          <p><strong>Estimated Delivery:</strong> {{estimated_delivery}}</p>
        </div>
""" + ITEMS_BLOCK + """
        <div class="text-center"><a href="{{tracking_url}}" class="btn">Track Package</a></div>
""",
        "Order #{{order_number}} has shipped via {{carrier}}. Tracking: {{tracking_number}}.",
    ),
    "order_delivered": _template(
        "Order Delivered",
        "Your order has been delivered! #{{order_number}}",
        _header("Delivered!"),
        """
        <p>Hi {{customer_name}}, your order #{{order_number}} was delivered on {{delivery_date}}.</p>
        <div class="alert alert-info">Enjoying your purchase? We'd love to hear what you think.</div>
        <div class="text-center"><a href="{{review_url}}" class="btn">Leave a Review</a></div>
""",
        "Order #{{order_number}} was delivered on {{delivery_date}}.",
    ),
    "order_cancelled": _template(
        "Order Cancelled",
        "Order Cancelled: #{{order_number}}",
        _header("Order Cancelled"),
        """
        <p>Hi {{customer_name}}, your order #{{order_number}} has been cancelled.</p>
        <div class="order-box">
          <p><strong>Reason:</strong> {{cancellation_reason}}</p>
          <p><strong>Refund Amount:</strong> {{refund_amount}}</p>
        </div>
        <p class="text-muted">Refunds usually appear within 5-10 business days.</p>
        <div class="text-center"><a href="{{store_url}}" class="btn">Continue Shopping</a></div>
""",
        "Order #{{order_number}} was cancelled. Refund: {{refund_amount}}.",
    ),
    "order_refunded": _template(
        "Order Refunded",
        "Refund Processed: #{{order_number}}",
        _header("Refund Processed"),
        """
        <p>Hi {{customer_name}}, we've processed a refund for order #{{order_number}}.</p>
        <div class="order-box">
          <p><strong>Refund Amount:</strong> {{refund_amount}}</p>
          <p><strong>Refund Method:</strong> {{refund_method}}</p>
          <p><strong>Processed On:</strong> {{refund_date}}</p>
        </div>
""" + ITEMS_BLOCK,
        "A refund of {{refund_amount}} for order #{{order_number}} has been processed.",
    ),
    "welcome_email": _template(
        "Welcome Email",
        "Welcome to {{store_name}}!",
        _header("Welcome, {{customer_name}}!"),
        """
        <p>Thanks for joining {{store_name}}. Here's a little something to get you started:</p>
        <div class="order-box text-center">
          <p><strong>Use code {{discount_code}}</strong> for {{discount_amount}} off your first order.</p>
        </div>
        <div class="text-center"><a href="{{store_url}}" class="btn">Start Shopping</a></div>
""",
        "Welcome to {{store_name}}, {{customer_name}}! Use {{discount_code}} for {{discount_amount}} off.",
    ),
    "password_reset": _template(
        "Password Reset",
        "Reset your password",
        _header("Reset Your Password"),
        """
        <p>Hi {{customer_name}}, we received a request to reset your password.</p>
        <div class="text-center"><a href="{{reset_url}}" class="btn">Reset Password</a></div>
        <div class="alert alert-warning">This link expires in {{expiry_time}}. If you didn't ask for it, ignore this email.</div>
""",
        "Reset your password: {{reset_url}} (expires in {{expiry_time}}).",
    ),
    "account_created": _template(
        "Account Created",
        "Your account is ready!",
        _header("Account Created"),
        """
        <p>Hi {{customer_name}}, your account at {{store_name}} is ready.</p>
        <div class="order-box">
          <p><strong>Username:</strong> {{customer_email}}</p>
        </div>
        <div class="text-center"><a href="{{login_url}}" class="btn">Sign In</a></div>
""",
        "Your {{store_name}} account ({{customer_email}}) is ready: {{login_url}}",
    ),
    "newsletter_welcome": _template(
        "Newsletter Welcome",
        "Welcome to our newsletter!",
        _header("You're Subscribed!"),
        """
        <p>Thanks for subscribing to the {{store_name}} newsletter.</p>
        <p>You'll be the first to hear about new arrivals, exclusive offers and events.</p>
        <div class="text-center"><a href="{{store_url}}" class="btn">Visit the Store</a></div>
        <p class="text-muted" style="font-size: 12px;"><a href="{{unsubscribe_url}}">Unsubscribe</a></p>
""",
        "Thanks for subscribing to {{store_name}}. Unsubscribe: {{unsubscribe_url}}",
    ),
    "abandoned_cart": _template(
        "Abandoned Cart",
        "You left something behind...",
        _header("Still thinking it over?"),
        """
        <p>Hi {{customer_name}}, your cart is waiting for you.</p>
""" + ITEMS_BLOCK + """
        <div class="order-box"><p><strong>Cart Total:</strong> {{cart_total}}</p></div>
        <div class="text-center"><a href="{{cart_url}}" class="btn">Complete Your Order</a></div>
""",
        "You left items in your cart ({{cart_total}}). Complete your order: {{cart_url}}",
    ),
    "back_in_stock": _template(
        "Back in Stock",
        "{{product_name}} is back in stock!",
        _header("It's Back!"),
        """
        <p>Good news: <strong>{{product_name}}</strong> is available again.</p>
        <div class="order-box text-center">
          <img src="{{product_image}}" alt="{{product_name}}" style="max-width: 200px;">
          <p><strong>{{product_price}}</strong></p>
        </div>
        <div class="text-center"><a href="{{product_url}}" class="btn">Shop Now</a></div>
""",
        "{{product_name}} is back in stock: {{product_url}}",
    ),
    "low_stock_alert": _template(
        "Low Stock Alert",
        "Low Stock Alert: {{product_name}}",
        _header("Low Stock Alert"),
        """
        <div class="alert alert-warning"><strong>{{product_name}}</strong> is running low.</div>
        <div class="order-box">
          <p><strong>SKU:</strong> {{product_sku}}</p>
          <p><strong>Current Stock:</strong> {{current_stock}}</p>
          <p><strong>Threshold:</strong> {{threshold}}</p>
        </div>
        <div class="text-center"><a href="{{admin_url}}" class="btn">Manage Inventory</a></div>
""",
        "{{product_name}} ({{product_sku}}) is low on stock: {{current_stock}} left.",
    ),
    "new_order_notification": _template(
        "New Order Notification",
        "New Order: #{{order_number}}",
        _header("New Order Received"),
        """
        <div class="order-box">
          <p><strong>Order:</strong> #{{order_number}}</p>
          <p><strong>Customer:</strong> {{customer_name}} ({{customer_email}})</p>
          <p><strong>Total:</strong> {{order_total}}</p>
        </div>
""" + ITEMS_BLOCK + """
        <div class="text-center"><a href="{{admin_order_url}}" class="btn">View Order</a></div>
""",
        "New order #{{order_number}} from {{customer_name}}: {{order_total}}.",
    ),
}


def extract_variables(*contents: str) -> List[str]:
    """
    Variable names used in the given template strings, in first-seen order

    {{#each items}} contributes its collection name (`items`); closing tags,
    block helpers and `this` are skipped.
    """
    seen: List[str] = []
    for content in contents:
        for prefix, name in PLACEHOLDER_RE.findall(content or ""):
            if prefix.strip() in ("#", "/") or name in _NON_VARIABLES:
                continue
            if name not in seen:
                seen.append(name)
    return seen


def get_default_template(key: str) -> Dict:
    """Copy of a library template with its variables listed"""
    template = DEFAULT_TEMPLATES[key]
    return {
        **template,
        "variables": extract_variables(template["subject"], template["htmlContent"], template["textContent"]),
    }
