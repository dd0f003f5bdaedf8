# @Title createOrder
# @Description place a new order
# @Param body body string true "order payload"
# @Success 201 string string "created"
# @Accept json
# @router /orders [post]
def create_order(request):
    pass
